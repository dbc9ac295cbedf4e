"""The protocol state machine.

``dispatch`` is a pure step function: given the current ``SessionState``
and one parsed command it returns the next state, the responses to write
and whether the session is over. The only side effect it can trigger is
the picker call for GETPIN, and that goes through the ``SecretPicker``
passed in, so tests can substitute an in-memory fake.
"""

import logging
import os
from dataclasses import dataclass
from typing import Tuple

from . import __version__, percent
from .commands import (
    Bye,
    Command,
    Comment,
    End,
    GetInfo,
    GetSecret,
    Help,
    Nop,
    Reset,
    SetCosmetic,
    SetDescription,
    SetOption,
    SetPrompt,
    SetTitle,
    Unknown,
)
from .errors import ErrorCode, GatewayError, NotImplementedCommand, PinentryError, ProtocolError
from .picker import SecretPicker
from .responses import Acknowledged, DataLine, Error, Farewell, Response
from .responses import Comment as CommentLine
from .state import SessionState

log = logging.getLogger("pinentry-anyrun.dispatcher")

FLAVOR = "anyrun"


@dataclass(frozen=True)
class Transition:
    state: SessionState
    responses: Tuple[Response, ...] = ()
    terminal: bool = False


def _ok(state: SessionState) -> Transition:
    return Transition(state, (Acknowledged(),))


def _fail(state: SessionState, exc: PinentryError, terminal: bool = False) -> Transition:
    return Transition(state, (Error.from_exception(exc),), terminal)


def _getinfo(item: str) -> str:
    if item == "flavor":
        return FLAVOR
    if item == "version":
        return __version__
    if item == "pid":
        return str(os.getpid())
    if item == "ttyinfo":
        fields = [os.environ.get(name, "") or "-" for name in ("GPG_TTY", "TERM", "DISPLAY")]
        return " ".join(fields)
    raise NotImplementedCommand("unknown GETINFO item", ErrorCode.UNEXPECTED)


def dispatch(
    state: SessionState,
    command: Command,
    picker: SecretPicker,
    lenient_unknown: bool = False,
) -> Transition:
    """Apply one command to the session state."""
    if isinstance(command, Comment):
        return Transition(state)

    if isinstance(command, Bye):
        return Transition(state, (Farewell("closing connection"),), terminal=True)

    if isinstance(command, Reset):
        return _ok(SessionState())

    if isinstance(command, (End, Help)):
        return _fail(state, NotImplementedCommand("not implemented"))

    if isinstance(command, (SetOption, Nop, SetPrompt, SetCosmetic)):
        return _ok(state)

    if isinstance(command, SetDescription):
        return _ok(state.with_description(percent.decode(command.text)))

    if isinstance(command, SetTitle):
        return _ok(state.with_title(percent.decode(command.text)))

    if isinstance(command, GetInfo):
        try:
            value = _getinfo(command.item)
        except NotImplementedCommand as e:
            return _fail(state, e)
        return Transition(state, (DataLine(percent.encode_data(value)), Acknowledged()))

    if isinstance(command, GetSecret):
        try:
            secret = picker.request_secret(state)
        except GatewayError as e:
            log.info(f"GETPIN failed: {e.message}")
            return _fail(state, e, terminal=True)
        return Transition(state, (DataLine(percent.encode_data(secret)), Acknowledged()))

    if isinstance(command, Unknown):
        log.debug(f"Unknown command: {command.raw.partition(' ')[0]}")
        if lenient_unknown:
            return Transition(state, (CommentLine(command.raw), Acknowledged()))
        error = Error.from_exception(ProtocolError("unknown command"))
        return Transition(state, (CommentLine(command.raw), error))

    raise TypeError(f"not a command: {command!r}")
