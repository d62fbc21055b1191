#!/usr/bin/env python3
"""
Registry command-line front end.
Turns options (and prompted input) into one operation request, runs it and
maps the outcome to a process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from enum import IntEnum
from typing import List, Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from . import __version__
from .config import RegistryConfig, load_config, setup_logging
from .engine import process
from .errors import (
    CorruptRegistryDataError,
    InvalidArgumentError,
    RegistryError,
    RegistryIOError,
)
from .fields import clean_field, require_field
from .operations import OperationRequest, build_request

logger = logging.getLogger(__name__)
console = Console(soft_wrap=True, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False)

CORRUPTION_SUGGESTION = "Suggestion: Either repair or reset registry database to avoid future errors"


class ExitCode(IntEnum):
    NORMAL = 0
    ERROR = 1
    FILE = 2
    FATAL = 3


def _file_argument(label: str):
    def convert(value: str) -> str:
        if clean_field(value) is None:
            raise argparse.ArgumentTypeError(f"Invalid {label}: {value!r}")
        return value

    return convert


def _exit_code_epilog(default_db: str) -> str:
    lines = [f"Default registry database file: {default_db}", "", "Exit codes:"]
    lines.extend(f"  {code.value}  {code.name}" for code in ExitCode)
    return "\n".join(lines)


def build_parser(default_db: Optional[str] = None) -> argparse.ArgumentParser:
    default_db = default_db or RegistryConfig().db_file
    parser = argparse.ArgumentParser(
        prog="kv-registry",
        description="Maintains a registry of key-value pairs in a flat text file",
        epilog=_exit_code_epilog(default_db),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (DEBUG) logging")
    parser.add_argument(
        "-n",
        "--dnd",
        action="store_true",
        help="Non-interactive: no confirmation prompts for critical operations",
    )
    parser.add_argument(
        "-d",
        "--db",
        metavar="FILE",
        type=_file_argument("external database name"),
        help="Use FILE as registry database (overrides the default database)",
    )
    parser.add_argument("--config", metavar="FILE", help="Path to config YAML")
    parser.add_argument("--log-file", metavar="FILE", help="Also write log records to FILE")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    modes = parser.add_mutually_exclusive_group(required=True)
    modes.add_argument("-R", "--reset-db", action="store_true", help="Reset the whole registry database")
    modes.add_argument("-r", "--repair-db", action="store_true", help="Delete only corrupted data from the database")
    modes.add_argument(
        "-m",
        "--merge-to-db",
        metavar="FILE",
        type=_file_argument("external source database name"),
        help="Merge FILE's valid records into the registry database",
    )
    modes.add_argument(
        "-e",
        "--entry",
        nargs="*",
        metavar="ARG",
        help="Enter [KEY [VALUE]] into the registry database (missing parts are prompted)",
    )
    modes.add_argument(
        "-f",
        "--force-entry",
        nargs="*",
        metavar="ARG",
        help="Like --entry, replacing the value if the key already exists",
    )
    modes.add_argument(
        "-q",
        "--query",
        nargs="?",
        const="",
        metavar="KEY",
        help="Query KEY from the registry database (prompted if omitted)",
    )
    return parser


def apply_overrides(config: RegistryConfig, args: argparse.Namespace) -> RegistryConfig:
    updates = {}
    if getattr(args, "db", None):
        updates["db_file"] = args.db
    if getattr(args, "log_file", None):
        updates["log_file"] = args.log_file
    if getattr(args, "verbose", False):
        updates["log_level"] = "DEBUG"
    if getattr(args, "dnd", False):
        updates["interactive"] = False

    return config.model_copy(update=updates)


def read_user_input(label: str) -> str:
    """Prompt until a non-blank answer is given."""
    answer = Prompt.ask(label, console=console)
    while answer is None or not answer.strip():
        answer = Prompt.ask(label, console=console)
    return answer


def confirm(message: str) -> bool:
    return Confirm.ask(f"Critical operation: {message}", console=console, default=False)


def _entry_pair(values: List[str]) -> List[str]:
    if len(values) > 2:
        raise InvalidArgumentError(f"Key and value pair already provided: {values[:2]}")
    pair = list(values)
    if not pair:
        pair.append(read_user_input("KEY"))
    if len(pair) == 1:
        pair.append(read_user_input("VALUE"))
    return [require_field(pair[0], "key"), require_field(pair[1], "value")]


def build_cli_request(args: argparse.Namespace, config: RegistryConfig) -> Optional[OperationRequest]:
    """Translate parsed options into a request; ``None`` means the user aborted."""
    common = {"db_file": config.db_file, "external_db": bool(getattr(args, "db", None))}

    if args.reset_db:
        if config.interactive and not confirm("Sure to reset registry database?"):
            return None
        return build_request("reset", **common)

    if args.repair_db:
        return build_request("repair", **common)

    if args.merge_to_db is not None:
        if config.interactive and not confirm("Sure to merge file data in registry database?"):
            return None
        return build_request("merge", source_file=args.merge_to_db, **common)

    if args.entry is not None or args.force_entry is not None:
        force = args.force_entry is not None
        key, value = _entry_pair(args.force_entry if force else args.entry)
        return build_request("entry", key=key, value=value, force=force, **common)

    if args.query is not None:
        key = args.query or read_user_input("KEY")
        return build_request("query", key=require_field(key, "query key"), **common)

    raise InvalidArgumentError("No valid operation provided")


def show_error(error: BaseException, header: str) -> None:
    err_console.print(f"{header}{error}", markup=False, highlight=False)
    cause = error.__cause__
    if cause is not None:
        err_console.print(f"Cause: {type(cause).__name__} ({cause})", markup=False, highlight=False)


def run(args: argparse.Namespace, config: RegistryConfig) -> int:
    try:
        request = build_cli_request(args, config)
        if request is None:
            console.print("    [Aborting operation...]", markup=False)
            return ExitCode.NORMAL
        response = process(request)
        if response is not None:
            console.print(response, markup=False, highlight=False)
        return ExitCode.NORMAL
    except InvalidArgumentError as exc:
        show_error(exc, "Error: Invalid argument: ")
        return ExitCode.ERROR
    except RegistryIOError as exc:
        show_error(exc, "I/O Error: ")
        return ExitCode.FILE
    except CorruptRegistryDataError as exc:
        show_error(exc, "Error: Registry data corrupted!\n")
        err_console.print(CORRUPTION_SUGGESTION, markup=False, highlight=False)
        return ExitCode.FILE
    except RegistryError as exc:
        logger.error("Registry failure: %s", exc, exc_info=True)
        show_error(exc, "Fatal Error: ")
        return ExitCode.FATAL
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        err_console.print("Fatal Error: Unknown application error", markup=False)
        show_error(exc, "Error details: ")
        return ExitCode.FATAL


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    config = apply_overrides(config, args)

    setup_logging(config)
    return int(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
