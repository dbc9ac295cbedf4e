"""The Assuan session loop.

One ``Session`` serves one gpg-agent connection over a pair of streams:
greet, then read a line, parse it, dispatch it, write the responses, and
repeat until BYE, a failed GETPIN, or end of input.
"""

import logging
from typing import BinaryIO, Iterator, TextIO

from .commands import parse
from .dispatcher import dispatch
from .errors import InputIoError
from .picker import SecretPicker
from .responses import Acknowledged, DataLine, Error, Response, encode
from .state import SessionState

log = logging.getLogger("pinentry-anyrun.session")

GREETING = "Pleased to meet you"


def iter_lines(stream: BinaryIO) -> Iterator[str]:
    """Yield decoded lines from ``stream`` without their terminators.

    A final line without a trailing newline is still yielded. Read errors
    and bytes that are not UTF-8 raise ``InputIoError``.
    """
    while True:
        try:
            raw = stream.readline()
        except OSError as e:
            raise InputIoError(f"read failed: {e}") from e
        if not raw:
            return
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InputIoError(f"input is not valid UTF-8: {e.reason}") from None


class Session:
    """
    One protocol session between gpg-agent and the picker.

    Args:
        input_stream: binary stream commands are read from
        output_stream: text stream responses are written to
        picker: gateway used to answer GETPIN
        lenient_unknown: acknowledge unknown commands instead of failing
    """

    def __init__(
        self,
        input_stream: BinaryIO,
        output_stream: TextIO,
        picker: SecretPicker,
        lenient_unknown: bool = False,
    ):
        self.input = input_stream
        self.output = output_stream
        self.picker = picker
        self.lenient_unknown = lenient_unknown
        self.state = SessionState()

    def _send(self, response: Response) -> None:
        """Write one response; failures are logged, not raised."""
        line = encode(response)
        if isinstance(response, DataLine):
            log.debug("< D [redacted]")
        else:
            log.debug("< " + line.rstrip("\n"))
        try:
            self.output.write(line)
            self.output.flush()
        except (OSError, UnicodeError) as e:
            log.debug(f"Write failed: {type(e).__name__}")

    def run(self) -> int:
        """
        Serve the session until it terminates.

        Returns:
            Exit code (0 for a normal end, 1 for input failure or interrupt)
        """
        self._send(Acknowledged(GREETING))

        try:
            for line in iter_lines(self.input):
                log.debug(f"> {line}")
                transition = dispatch(
                    self.state, parse(line), self.picker, self.lenient_unknown
                )
                self.state = transition.state
                for response in transition.responses:
                    self._send(response)
                if transition.terminal:
                    log.debug("Session terminated")
                    break
            else:
                log.debug("End of input")
        except InputIoError as e:
            log.error(f"Input failed: {e.message}")
            self._send(Error.from_exception(e))
            return 1
        except KeyboardInterrupt:
            log.debug("Interrupted")
            return 1
        finally:
            self.state = SessionState()

        return 0
