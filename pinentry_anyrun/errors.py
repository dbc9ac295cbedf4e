"""Error codes and exceptions for the pinentry protocol.

Every failure the session can report is a ``PinentryError`` carrying the
numeric code that ends up on the ``ERR`` line. The codes are GnuPG error
values and must stay byte-for-byte stable for gpg-agent.
"""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """GnuPG error values used on ``ERR`` lines."""

    UNKNOWN_COMMAND = 536871187  # GPG_ERR_ASS_UNKNOWN_CMD, user source
    UNEXPECTED = 83886118  # GPG_ERR_UNEXPECTED, pinentry source
    CANCELLED = 83886179  # GPG_ERR_CANCELED, pinentry source


class PinentryError(Exception):
    """Base class for errors that are reported back to the caller."""

    default_code: ErrorCode = ErrorCode.UNEXPECTED

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        # ErrorCode() rejects values outside the enum.
        self.code = self.default_code if code is None else ErrorCode(code)


class ProtocolError(PinentryError):
    """An input line that does not name a known command."""

    default_code = ErrorCode.UNKNOWN_COMMAND


class NotImplementedCommand(PinentryError):
    """A known command this pinentry deliberately does not implement."""


class InputIoError(PinentryError):
    """Reading or decoding the input stream failed. Fatal for the session."""

    default_code = ErrorCode.UNKNOWN_COMMAND


class GatewayError(PinentryError):
    """The external picker failed, timed out or was cancelled."""
