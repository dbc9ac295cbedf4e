"""Runtime settings, read from the environment.

Environment Variables:
    PINENTRY_ANYRUN_BIN      - Picker binary (default: anyrun)
    PINENTRY_ANYRUN_ARGS     - Picker arguments, shell-quoted
    PINENTRY_ANYRUN_TIMEOUT  - Seconds to wait for the picker (default: forever)
    PINENTRY_ANYRUN_DEBUG=1  - Enable debug logging to stderr
    PINENTRY_ANYRUN_LOG      - Log file path, empty to disable
    PINENTRY_ANYRUN_LENIENT=1 - Acknowledge unknown commands instead of failing
"""

import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

log = logging.getLogger("pinentry-anyrun.config")

DEFAULT_PICKER = "anyrun"
DEFAULT_PICKER_ARGS = [
    "--plugins",
    "libpinentry.so",
    "--show-results-immediately",
    "true",
]
DEFAULT_LOG_PATH = Path.home() / ".cache" / "pinentry-anyrun" / "pinentry.log"

_TRUTHY = ("1", "true", "yes")


def parse_timeout(value: Optional[str]) -> Optional[float]:
    """Parse a timeout in seconds; blank, invalid or non-positive means none."""
    if value is None or not value.strip():
        return None
    try:
        seconds = float(value)
    except ValueError:
        log.warning(f"Ignoring invalid picker timeout {value!r}")
        return None
    if seconds <= 0:
        log.warning(f"Ignoring non-positive picker timeout {value!r}")
        return None
    return seconds


@dataclass
class Settings:
    picker: str = DEFAULT_PICKER
    picker_args: list = field(default_factory=lambda: list(DEFAULT_PICKER_ARGS))
    timeout: Optional[float] = None
    debug: bool = False
    log_path: Optional[Path] = DEFAULT_LOG_PATH
    lenient_unknown: bool = False

    @property
    def picker_command(self) -> list:
        return [self.picker, *self.picker_args]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls()

        settings.picker = env.get("PINENTRY_ANYRUN_BIN", "") or DEFAULT_PICKER
        if "PINENTRY_ANYRUN_ARGS" in env:
            settings.picker_args = shlex.split(env["PINENTRY_ANYRUN_ARGS"])
        settings.timeout = parse_timeout(env.get("PINENTRY_ANYRUN_TIMEOUT"))
        settings.debug = env.get("PINENTRY_ANYRUN_DEBUG", "").lower() in _TRUTHY
        settings.lenient_unknown = (
            env.get("PINENTRY_ANYRUN_LENIENT", "").lower() in _TRUTHY
        )
        if "PINENTRY_ANYRUN_LOG" in env:
            raw = env["PINENTRY_ANYRUN_LOG"]
            settings.log_path = Path(raw).expanduser() if raw else None

        return settings
