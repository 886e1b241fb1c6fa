"""
The result model, the parser protocol and the functions that invoke parsers.
"""

from __future__ import annotations
from typing import Literal, TypeVar, Generic, NamedTuple, Protocol, TypeAlias, NoReturn, final

from collections.abc import Iterable
import logging

log = logging.getLogger(__name__)


_T = TypeVar("_T")
_A = TypeVar("_A")
_B = TypeVar("_B")
_CovT = TypeVar("_CovT", covariant=True)


class ParseError(Exception):
    """
    The exception that's raised when a failed parse has to be reported to the caller.

    Parsers never raise this themselves. It's produced by `Failure.error()`, `Failure.unwrap()` and `parse_all()`.
    """

    def __init__(self, msg: str, src: str | None = None, pos: int | None = None) -> None:
        """
        `msg`: The reason for the error.
        `src`: The string that was being parsed, if known.
        `pos`: The position of the error, if known. Only used together with `src`.
        """
        super().__init__(msg)
        self.msg: str = msg
        self.src: str | None = src
        self.pos: int | None = pos
        if src is not None and pos is not None:
            self._append_pos_note(src, pos)

    def _append_pos_note(self, src: str, pos: int, msg: str | None = None) -> None:
        note: list[str] = [] if msg is None else [msg]

        pos = min(pos, len(src))
        # should still work with CRLF
        line = src.count("\n", 0, pos) + 1
        column = pos - src.rfind("\n", 0, pos) # also right when rfind returns -1
        note.append(f"At position {pos} (line {line}, column {column})")

        lines = src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*20}^")
        self.add_note("\n".join(note))


@final
class Success(Generic[_CovT]):
    """
    Returned from a parser when it has matched.

    ```
    r = parser("input")
    if r:
        r.match         # the produced value
        r.remaining     # the unconsumed suffix of the input
    else:
        r.message       # `r` is a `Failure`
    ```
    """
    __slots__ = ("match", "remaining")
    match: _CovT
    remaining: str

    def __init__(self, match: _CovT, remaining: str) -> None:
        object.__setattr__(self, "match", match)
        object.__setattr__(self, "remaining", remaining)

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise AttributeError(f"Success is immutable, can't set {name!r}")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError(f"Success is immutable, can't delete {name!r}")

    def unwrap(self) -> _CovT:
        return self.match

    def __bool__(self) -> Literal[True]:
        return True

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Success):
            return self.match == other.match and self.remaining == other.remaining
        return NotImplemented

    def __repr__(self) -> str:
        return f"Success({self.match!r}, {self.remaining!r})"


@final
class Failure:
    """
    Returned from a parser when it hasn't matched. Can be converted into a `ParseError`.

    Carries no position. Whatever the failing parser wanted to report is in `message`.
    """
    __slots__ = ("message",)
    message: str

    def __init__(self, message: str) -> None:
        object.__setattr__(self, "message", message)

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise AttributeError(f"Failure is immutable, can't set {name!r}")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError(f"Failure is immutable, can't delete {name!r}")

    def error(self, src: str | None = None) -> ParseError:
        """Converts this to a ParseError."""
        return ParseError(self.message, src)

    def unwrap(self) -> NoReturn:
        raise self.error()

    def __bool__(self) -> Literal[False]:
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Failure):
            return self.message == other.message
        return NotImplemented

    def __repr__(self) -> str:
        return f"Failure({self.message!r})"


Result: TypeAlias = Success[_T] | Failure
"""
Either a `Success` or a `Failure`. Tell them apart with `if result:`.

When used for typing: `Result[int]`
"""


class Pair(NamedTuple, Generic[_A, _B]):
    """Both values of a `concat_pair`. Unpacks like a tuple."""
    first: _A
    second: _B


class Present(NamedTuple, Generic[_T]):
    """What `optional` produces when its parser matched. The absent case is `None`."""
    value: _T


class Parser(Protocol[_CovT]):
    """
    A protocol for parsers: takes the whole remaining input and returns a `Result`.

    Any function with the right signature is a parser, and every combinator returns one.
    Parsers hold no mutable state, so a grammar can be built once and invoked any number of times.
    """
    def __call__(self, src: str, /) -> Result[_CovT]: ...


def run(parser: Parser[_T], src: str) -> Result[_T]:
    """Invokes the parser on the input."""
    return parser(src)

def parse_all(parser: Parser[_T], src: str) -> _T:
    """
    Invokes the parser and requires it to consume the whole input.

    Returns the match, or raises a `ParseError` if the parser failed or left trailing input.
    """
    result = parser(src)
    if not result:
        log.debug("parse failed: %s", result.message)
        raise result.error(src)
    if result.remaining:
        pos = len(src) - len(result.remaining)
        log.debug("parse left %d trailing characters at position %d", len(result.remaining), pos)
        raise ParseError(f"Expected end of input but {len(result.remaining)} characters remain", src, pos)
    return result.match

def chars_to_string(chars: Iterable[str]) -> str:
    """Joins a sequence of characters (as produced by `many` or `transpose`) into a string."""
    return "".join(chars)
