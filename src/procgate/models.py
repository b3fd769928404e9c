"""
Pydantic models for procgate settings validation.
"""

import codecs
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

VALID_ERROR_HANDLERS = {"strict", "ignore", "replace", "backslashreplace", "surrogateescape"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class GatewaySettings(BaseModel):
    """Settings for the default process gateway and its logging."""

    encoding: Optional[str] = Field(
        default=None, description="Codec for captured output (default: locale encoding)"
    )
    errors: str = Field(default="replace", description="Decoding error handler")
    log_level: str = Field(default="WARNING", description="Log level")
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_file: Optional[Path] = Field(default=None, description="Append JSON log lines to this file")

    @field_validator("encoding")
    @classmethod
    def encoding_must_exist(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    @field_validator("errors")
    @classmethod
    def errors_must_be_valid(cls, v: str) -> str:
        if v not in VALID_ERROR_HANDLERS:
            raise ValueError(f"errors must be one of: {sorted(VALID_ERROR_HANDLERS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_valid(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {sorted(VALID_LOG_LEVELS)}")
        return level
