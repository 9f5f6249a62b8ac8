"""ZeTranslate command-line entry point.

Runs one of the extension commands against a text file (or standard input) with the terminal
acting as the editor: the selection is a range of lines, language prompts are numbered lists.

Examples:
    zetranslate notes.txt --start 3 --end 5
    zetranslate notes.txt --source English --target French
    cat notes.txt | zetranslate --source English --target Japanese > notes.ja.txt
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from dotenv import load_dotenv

from config.loader import ConfigLoader, ConfigLoaderError
from core.commands import CommandBase, TranslateCommand
from core.editor.terminal import SelectionRangeError, TerminalEditor
from core.extension import Extension, UnknownCommandError
from core.version import VERSION
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

CFG_FILE: Final[str] = "zetranslate.ini"
ENV_FILE: Final[str] = ".env"

EXIT_OK: Final[int] = 0
EXIT_ERROR: Final[int] = 1
EXIT_USAGE: Final[int] = 2

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(EXIT_USAGE)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        msg: str = f"invalid line number: '{value}'"
        raise argparse.ArgumentTypeError(msg) from None
    if number < 1:
        msg = f"line numbers start at 1: '{value}'"
        raise argparse.ArgumentTypeError(msg)
    return number


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = _ArgumentParser(
        prog="zetranslate",
        description="Translate a selection of a text file in place.",
        epilog="Example: zetranslate notes.txt --start 3 --end 5 --source English --target French",
    )
    parser.add_argument("path", nargs="?", type=Path, help="File to edit. Reads stdin and writes stdout if omitted")
    parser.add_argument("--start", type=_positive_int, metavar="LINE", help="First selected line (1-based)")
    parser.add_argument("--end", type=_positive_int, metavar="LINE", help="Last selected line (inclusive)")
    parser.add_argument("--source", metavar="LANGUAGE", help="Answer to the source language prompt")
    parser.add_argument("--target", metavar="LANGUAGE", help="Answer to the target language prompt")
    parser.add_argument(
        "--command",
        default=TranslateCommand.command_id,
        choices=sorted(CommandBase.registry),
        help="Command to run (default: %(default)s)",
    )
    parser.add_argument("--engine", metavar="NAME", help="Override the translation engine")
    parser.add_argument("--config", metavar="FILE", help=f"Configuration file (default: {CFG_FILE})")
    parser.add_argument("--env-file", metavar="FILE", default=ENV_FILE, help="File with API keys (default: .env)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def load_env_file(env_file: str) -> bool:
    """Load API keys from a dotenv file without overriding variables already set.

    Returns:
        bool: True if the file existed and was loaded.
    """
    env_path = Path(env_file)
    if not env_path.exists():
        logger.debug("dotenv file does not exist: %s", env_path)
        return False
    loaded: bool = load_dotenv(env_path, override=False)
    logger.debug("Loaded dotenv file: %s", env_path)
    return loaded


def load_config(args: argparse.Namespace) -> Config:
    """Load configuration file and apply CLI overrides.

    The default configuration file is optional; a file given with ``--config`` must exist.

    Raises:
        ConfigLoaderError: If configuration file cannot be loaded.
    """
    config: Config = ConfigLoader(
        config_filename=args.config or CFG_FILE,
        script_name="zetranslate",
        missing_ok=args.config is None,
        engine=args.engine,
        debug=args.debug,
    ).config
    config.GENERAL.VERSION = VERSION
    return config


def build_editor(args: argparse.Namespace) -> TerminalEditor:
    """Create the terminal editor for the requested document and selection.

    Raises:
        SelectionRangeError: If the line range does not fit the document.
        OSError: If the file cannot be read.
    """
    # Positional: the first answer is for the source prompt, the second for the target prompt.
    answers: list[str | None] = [args.source, args.target]
    return TerminalEditor(args.path, start_line=args.start, end_line=args.end, answers=answers)


async def run(args: argparse.Namespace, config: Config) -> int:
    """Run the selected command inside an activated extension."""
    if args.path is None and args.command == TranslateCommand.command_id and None in (args.source, args.target):
        print("Error: --source and --target are required when the document is read from stdin", file=sys.stderr)
        return EXIT_USAGE

    try:
        editor: TerminalEditor = build_editor(args)
    except SelectionRangeError as err:
        print(f"Error: {err}", file=sys.stderr)
        return EXIT_USAGE
    except (OSError, UnicodeDecodeError) as err:
        print(f"Error: cannot read '{args.path}': {err}", file=sys.stderr)
        return EXIT_ERROR

    async with Extension(config, editor) as extension:
        try:
            await extension.execute(args.command)
        except UnknownCommandError as err:
            print(f"Error: {err}", file=sys.stderr)
            return EXIT_USAGE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        int: Process exit code.
    """
    check_python_version()
    args: argparse.Namespace = parse_arguments(argv)
    load_env_file(args.env_file)

    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("Error: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return EXIT_USAGE

    LoggerUtils.from_general(config.GENERAL, debug=args.debug)
    logger.info("%s %s", config.GENERAL.SCRIPT_NAME, config.GENERAL.VERSION)
    logger.debug("Configuration: %s", config)

    try:
        return asyncio.run(run(args, config))
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled by user.", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
