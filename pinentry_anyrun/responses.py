"""Assuan responses and their wire encoding."""

from dataclasses import dataclass
from typing import Optional, Union

from .errors import PinentryError


@dataclass(frozen=True)
class Acknowledged:
    text: Optional[str] = None


@dataclass(frozen=True)
class Error:
    code: int
    message: str

    @classmethod
    def from_exception(cls, exc: PinentryError) -> "Error":
        return cls(int(exc.code), exc.message)


@dataclass(frozen=True)
class Comment:
    text: Optional[str] = None


@dataclass(frozen=True)
class Farewell:
    text: Optional[str] = None


@dataclass(frozen=True)
class DataLine:
    text: str


@dataclass(frozen=True)
class OptionEcho:
    name: str
    value: Optional[str] = None


Response = Union[Acknowledged, Error, Comment, Farewell, DataLine, OptionEcho]


def _with_arg(keyword: str, text: Optional[str]) -> str:
    if text is None:
        return keyword
    return f"{keyword} {text}"


def encode(response: Response) -> str:
    """Render a response as exactly one newline-terminated line."""
    if isinstance(response, Acknowledged):
        line = _with_arg("OK", response.text)
    elif isinstance(response, Error):
        line = f"ERR {int(response.code)} {response.message}"
    elif isinstance(response, Comment):
        line = _with_arg("#", response.text)
    elif isinstance(response, Farewell):
        line = _with_arg("BYE", response.text)
    elif isinstance(response, DataLine):
        line = f"D {response.text}"
    elif isinstance(response, OptionEcho):
        if response.value is None:
            line = f"OPTION {response.name}"
        else:
            line = f"OPTION {response.name}={response.value}"
    else:
        raise TypeError(f"not a response: {response!r}")
    return line + "\n"
