#!/usr/bin/env python3
"""
Command line entry point for procgate.
"""

import argparse
import json
import sys
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from procgate import __version__
from procgate.backends.subprocess_gateway import SubprocessGateway
from procgate.di import current_gateway, get_registry
from procgate.interfaces.process import LaunchError, ProcessGateway
from procgate.logging import configure_logging
from procgate.models import GatewaySettings

console = Console(stderr=True, highlight=False)

# Shell conventions: "command not found", and 128 + N for death by signal N
LAUNCH_FAILURE_EXIT_CODE = 127
SIGNAL_EXIT_BASE = 128


def exit_status(exit_code: int) -> int:
    """Map a child's return code to this process's exit status."""
    if exit_code < 0:
        return SIGNAL_EXIT_BASE - exit_code
    return exit_code


def _emit(stdout: str, stderr: str) -> None:
    if stdout:
        sys.stdout.write(stdout)
        sys.stdout.flush()
    if stderr:
        sys.stderr.write(stderr)
        sys.stderr.flush()


def cmd_run(args, gateway: Optional[ProcessGateway] = None) -> int:
    """Run a command to completion and relay its output."""
    gateway = gateway or current_gateway()
    result = gateway.run(args.executable, args.arguments, run_in_shell=args.shell)

    if args.json:
        print(
            json.dumps(
                {
                    "executable": args.executable,
                    "arguments": args.arguments,
                    "exit_code": result.exit_code,
                    "stdout": result.stdout,
                    "stderr": result.stderr,
                }
            )
        )
    else:
        _emit(result.stdout, result.stderr)
    return result.exit_code


def cmd_start(args, gateway: Optional[ProcessGateway] = None) -> int:
    """Start a command, report its pid, then wait for it."""
    gateway = gateway or current_gateway()
    handle = gateway.start(
        args.executable,
        args.arguments,
        working_directory=args.cwd,
        run_in_shell=args.shell,
    )
    console.print(f"[cyan]Started {escape(args.executable)} (pid {handle.pid})[/]")

    stdout, stderr = handle.communicate()
    _emit(stdout or "", stderr or "")
    exit_code = handle.returncode
    color = "green" if exit_code == 0 else "yellow"
    console.print(f"[{color}]Process {handle.pid} exited with code {exit_code}[/]")
    return exit_code


def _add_command_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--shell", action="store_true", help="Run the command through the system shell"
    )
    parser.add_argument("executable", help="Executable name or path")
    parser.add_argument("arguments", nargs=argparse.REMAINDER, help="Arguments for the executable")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procgate", description="Launch processes through the procgate gateway"
    )
    parser.add_argument("--version", action="version", version=f"procgate {__version__}")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--log-file", default=None, help="Also append JSON logs to this file")
    parser.add_argument("--encoding", default=None, help="Encoding of captured output")
    parser.add_argument(
        "--errors", default="replace", help="Decoding error handler (default: replace)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    run_parser = subparsers.add_parser("run", help="Run a command and wait for it")
    run_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_command_arguments(run_parser)
    run_parser.set_defaults(func=cmd_run)

    start_parser = subparsers.add_parser("start", help="Start a command and report its pid")
    start_parser.add_argument("--cwd", default=None, help="Working directory for the process")
    _add_command_arguments(start_parser)
    start_parser.set_defaults(func=cmd_start)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(2)

    try:
        settings = GatewaySettings(
            encoding=args.encoding,
            errors=args.errors,
            log_level=args.log_level,
            log_json=args.log_json,
            log_file=args.log_file,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid options: {escape(str(e))}[/]")
        sys.exit(2)

    configure_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        log_file=settings.log_file,
    )

    registry = get_registry()
    if not registry.is_installed():
        registry.install(SubprocessGateway(settings))

    try:
        exit_code = args.func(args)
    except LaunchError as e:
        console.print(f"[red]Failed to launch {escape(e.executable)}: {escape(str(e.strerror))}[/]")
        sys.exit(LAUNCH_FAILURE_EXIT_CODE)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        sys.exit(130)

    sys.exit(exit_status(exit_code))


if __name__ == "__main__":
    main()
