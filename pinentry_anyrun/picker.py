"""Gateway to the external picker program.

The picker (anyrun with its pinentry plugin by default) is started once
per GETPIN. It reads one line of RON describing the dialog from stdin:

    (title:Some("Unlock key"),description:None)

and answers with exactly one line on stdout holding the secret. Exiting
without printing anything means the user cancelled.
"""

import logging
import subprocess
import unicodedata
from typing import Optional, Protocol, Sequence

from .errors import ErrorCode, GatewayError
from .state import SessionState

log = logging.getLogger("pinentry-anyrun.picker")

_RON_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


class SecretPicker(Protocol):
    def request_secret(self, state: SessionState) -> str:
        """Return the secret the user picked, or raise ``GatewayError``."""
        ...


def _ron_string(text: str) -> str:
    out = []
    for c in text:
        category = unicodedata.category(c)
        if c in _RON_ESCAPES:
            out.append(_RON_ESCAPES[c])
        elif category[0] == "C" or category in ("Zl", "Zp"):
            # Non-printables use Rust's \u{...} form, which RON accepts.
            out.append(f"\\u{{{ord(c):x}}}")
        else:
            out.append(c)
    return '"' + "".join(out) + '"'


def _ron_option(value: Optional[str]) -> str:
    if value is None:
        return "None"
    return f"Some({_ron_string(value)})"


def to_ron(state: SessionState) -> str:
    """Serialize the session state the way the picker plugin expects it."""
    return (
        f"(title:{_ron_option(state.title)},"
        f"description:{_ron_option(state.description)})"
    )


class AnyrunPicker:
    """Runs the picker as a subprocess, one process per request."""

    def __init__(self, command: Sequence[str], timeout: Optional[float] = None):
        self.command = list(command)
        self.timeout = timeout

    def request_secret(self, state: SessionState) -> str:
        payload = (to_ron(state) + "\n").encode("utf-8")
        log.debug(f"Starting picker: {self.command}")

        try:
            proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
            )
        except OSError as e:
            log.error(f"Could not start picker {self.command[0]!r}: {e}")
            raise GatewayError(f"cannot start picker: {e}", ErrorCode.UNEXPECTED) from e

        # communicate() writes, closes stdin, drains stdout and reaps.
        try:
            stdout, _ = proc.communicate(input=payload, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
            log.warning(f"Picker timed out after {self.timeout}s")
            raise GatewayError(
                f"picker timed out after {self.timeout:g}s", ErrorCode.UNEXPECTED
            )
        except OSError as e:
            proc.kill()
            proc.wait()
            log.error(f"Lost contact with picker: {e}")
            raise GatewayError(f"picker I/O failed: {e}", ErrorCode.UNEXPECTED) from e

        if proc.returncode != 0:
            log.warning(f"Picker exited with status {proc.returncode}")
            raise GatewayError(
                f"picker exited with status {proc.returncode}", ErrorCode.UNEXPECTED
            )

        if not stdout:
            log.info("Picker produced no output, treating as cancel")
            raise GatewayError("operation cancelled", ErrorCode.CANCELLED)

        line = stdout.split(b"\n", 1)[0]
        if line.endswith(b"\r"):
            line = line[:-1]
        try:
            secret = line.decode("utf-8")
        except UnicodeDecodeError:
            log.error("Picker output is not valid UTF-8")
            raise GatewayError(
                "picker output is not valid UTF-8", ErrorCode.UNEXPECTED
            ) from None

        log.debug("Picker returned a secret")
        return secret
