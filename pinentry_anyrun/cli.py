"""
pinentry-anyrun - pinentry for gpg-agent that prompts through anyrun

Install:
    pip install pinentry-anyrun

Configure gpg-agent.conf:
    pinentry-program /path/to/pinentry-anyrun

gpg-agent starts pinentry programs with flags such as --display,
--ttyname or --lc-ctype. Flags we do not use are accepted and ignored.
See ``pinentry_anyrun.config`` for the environment variables.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, TextIO

from . import __version__
from .config import Settings, parse_timeout
from .logs import configure_logging
from .picker import AnyrunPicker
from .session import Session

log = logging.getLogger("pinentry-anyrun.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pinentry-anyrun",
        description="Assuan pinentry that asks for secrets through an anyrun picker",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--picker",
        help="Picker binary to run for GETPIN (default: $PINENTRY_ANYRUN_BIN or anyrun)",
    )
    parser.add_argument(
        "--timeout",
        help="Seconds to wait for the picker before giving up (default: no limit)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Log debug output, including protocol traffic, to stderr",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write the log here instead of ~/.cache/pinentry-anyrun/pinentry.log",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Do not write a log file",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Acknowledge unknown commands with OK instead of an error",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def load_settings(argv: Optional[Sequence[str]] = None) -> tuple[Settings, list]:
    """Build settings from the environment, then apply command-line flags.

    Returns:
        Tuple of (settings, ignored arguments)
    """
    args, ignored = build_parser().parse_known_args(argv)
    settings = Settings.from_env()

    if args.picker:
        settings.picker = args.picker
    if args.timeout is not None:
        settings.timeout = parse_timeout(args.timeout)
    if args.debug:
        settings.debug = True
    if args.log_file is not None:
        settings.log_path = args.log_file
    if args.no_log_file:
        settings.log_path = None
    if args.lenient:
        settings.lenient_unknown = True

    return settings, ignored


def utf8_stdout() -> TextIO:
    """stdout as a UTF-8 text stream, whatever the locale says."""
    sys.stdout.reconfigure(encoding="utf-8", newline="\n", line_buffering=True)
    return sys.stdout


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Entry point."""
    settings, ignored = load_settings(argv)
    configure_logging(settings.debug, settings.log_path)

    log.info("pinentry-anyrun starting")
    log.debug(f"Picker command: {settings.picker_command}")
    log.debug(f"Picker timeout: {settings.timeout}")
    log.debug(f"Log file: {settings.log_path}")
    if ignored:
        log.debug(f"Ignoring arguments: {ignored}")

    picker = AnyrunPicker(settings.picker_command, timeout=settings.timeout)
    session = Session(
        stdin if stdin is not None else sys.stdin.buffer,
        stdout if stdout is not None else utf8_stdout(),
        picker,
        lenient_unknown=settings.lenient_unknown,
    )
    status = session.run()
    log.info(f"pinentry-anyrun exiting with status {status}")
    return status
