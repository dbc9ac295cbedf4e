"""Assuan command parsing.

``parse`` turns one input line into one of the command dataclasses below.
It never fails: anything it does not recognize becomes ``Unknown``.
Arguments are carried raw; percent-decoding is the dispatcher's job.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class CosmeticKind(Enum):
    """SET*/dialog commands that are acknowledged but change nothing."""

    OK = "SETOK"
    CANCEL = "SETCANCEL"
    NOT_OK = "SETNOTOK"
    ERROR = "SETERROR"
    QUALITY_BAR = "SETQUALITYBAR"
    QUALITY_BAR_TT = "SETQUALITYBAR_TT"
    CONFIRM = "CONFIRM"
    MESSAGE = "MESSAGE"
    KEYINFO = "SETKEYINFO"
    TIMEOUT = "SETTIMEOUT"
    REPEAT = "SETREPEAT"
    REPEAT_ERROR = "SETREPEATERROR"
    GENPIN = "SETGENPIN"
    GENPIN_TT = "SETGENPIN_TT"


@dataclass(frozen=True)
class Comment:
    pass


@dataclass(frozen=True)
class Bye:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class End:
    pass


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Nop:
    pass


@dataclass(frozen=True)
class GetSecret:
    pass


@dataclass(frozen=True)
class SetOption:
    name: str
    value: Optional[str] = None


@dataclass(frozen=True)
class SetPrompt:
    text: str


@dataclass(frozen=True)
class SetDescription:
    text: str


@dataclass(frozen=True)
class SetTitle:
    text: str


@dataclass(frozen=True)
class SetCosmetic:
    kind: CosmeticKind
    text: Optional[str] = None


@dataclass(frozen=True)
class GetInfo:
    item: str


@dataclass(frozen=True)
class Unknown:
    raw: str


Command = Union[
    Comment,
    Bye,
    Reset,
    End,
    Help,
    SetOption,
    Nop,
    GetSecret,
    SetPrompt,
    SetDescription,
    SetTitle,
    SetCosmetic,
    GetInfo,
    Unknown,
]

# Verbs that take no argument; anything after them is ignored.
_BARE = {
    "BYE": Bye(),
    "RESET": Reset(),
    "END": End(),
    "HELP": Help(),
    "NOP": Nop(),
    "GETPIN": GetSecret(),
}

_COSMETIC = {kind.value: kind for kind in CosmeticKind}


def parse(line: str) -> Command:
    """Classify a single protocol line (without its terminator)."""
    if not line or line[0] == "#":
        return Comment()

    verb, _, rest = line.partition(" ")

    if verb in _BARE:
        return _BARE[verb]
    if verb == "SETDESC":
        return SetDescription(rest)
    if verb == "SETTITLE":
        return SetTitle(rest)
    if verb == "SETPROMPT":
        return SetPrompt(rest)
    if verb == "GETINFO":
        return GetInfo(rest)
    if verb == "OPTION":
        name, sep, value = rest.partition("=")
        if sep:
            return SetOption(name, value)
        return SetOption(rest, None)
    if verb in _COSMETIC:
        return SetCosmetic(_COSMETIC[verb], rest or None)

    return Unknown(line)
