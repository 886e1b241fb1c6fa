"""
Functions that take parsers and return new parsers.

None of the parsers built here raise while parsing. A failing sub-parser's `Failure` is either returned
as-is, or absorbed by the alternation family (`or_`, `any_of`, `optional`, `many`, `not_`).
"""

from __future__ import annotations
from typing import Any, TypeVar, Callable, Sequence

import functools

from parsecomb.main import (
    Success,
    Failure,
    Result,
    Pair,
    Present,
    Parser,
)


_T = TypeVar("_T")
_U = TypeVar("_U")
_V = TypeVar("_V")


# sequencing

def concat(first: Parser[Any], second: Parser[_U]) -> Parser[_U]:
    """
    A Parser factory.

    Runs `first`, then `second` on what `first` left. Returns the result of `second`.
    """
    def inner(src: str) -> Result[_U]:
        r = first(src)
        if not r:
            return r
        return second(r.remaining)
    return inner

def concat_pair(first: Parser[_T], second: Parser[_U]) -> Parser[Pair[_T, _U]]:
    """
    A Parser factory.

    Runs `first`, then `second` on what `first` left. Keeps both values as a `Pair`.
    """
    def inner(src: str) -> Result[Pair[_T, _U]]:
        r1 = first(src)
        if not r1:
            return r1
        r2 = second(r1.remaining)
        if not r2:
            return r2
        return Success(Pair(r1.match, r2.match), r2.remaining)
    return inner

with_ = concat_pair

def fold_left(parser: Parser[_T], trailing: Parser[Any]) -> Parser[_T]:
    """
    A Parser factory.

    Runs `parser`, then `trailing`. Keeps the value of `parser` and the remainder of `trailing`.
    """
    def inner(src: str) -> Result[_T]:
        r1 = parser(src)
        if not r1:
            return r1
        r2 = trailing(r1.remaining)
        if not r2:
            return r2
        return Success(r1.match, r2.remaining)
    return inner

followed_by = fold_left

def fold_right(leading: Parser[Any], parser: Parser[_T]) -> Parser[_T]:
    """
    A Parser factory.

    Runs `leading`, then `parser`. Discards the value of `leading`.
    """
    return concat(leading, parser)

before = fold_right
following = fold_right

def surrounding(parser: Parser[_T], left: Parser[Any], right: Parser[Any] | None = None) -> Parser[_T]:
    """
    A Parser factory.

    Matches `left`, `parser` and `right` in sequence and keeps only the value of `parser`.

    If `right` isn't given, `left` is used on both sides.
    """
    if right is None:
        right = left
    return fold_left(fold_right(left, parser), right)


# alternation

def or_(first: Parser[_T], second: Parser[_T]) -> Parser[_T]:
    """
    A Parser factory.

    Tries `first`. If it fails, tries `second` on the same input and returns whatever it returns,
    so the failure message of `first` is never seen.
    """
    def inner(src: str) -> Result[_T]:
        r = first(src)
        if r:
            return r
        return second(src)
    return inner

def any_of(parsers: Sequence[Parser[_T]]) -> Parser[_T]:
    """
    A Parser factory.

    Tries the parsers in order until one matches. If none match, fails with the last parser's failure.
    """
    if len(parsers) <= 0:
        raise ValueError("At least one parser required.")
    return functools.reduce(or_, parsers)

def and_(gate: Parser[Any], parser: Parser[_T]) -> Parser[_T]:
    """
    A Parser factory.

    Requires `gate` to match, then throws its result away and runs `parser` from the same starting point.

    ```
    and_(character("a"), character("a"))("abbb") == Success("a", "bbb")
    ```
    """
    def inner(src: str) -> Result[_T]:
        r = gate(src)
        if not r:
            return r
        return parser(src)
    return inner

def not_(parser: Parser[_T], failure_message: Callable[[_T], str]) -> Parser[None]:
    """
    A Parser factory.

    Negative lookahead. Succeeds with `None` where `parser` fails, fails where it matches.
    `failure_message` receives the value `parser` matched. Never consumes input.
    """
    def inner(src: str) -> Result[None]:
        r = parser(src)
        if r:
            return Failure(failure_message(r.match))
        return Success(None, src)
    return inner

def lookahead(parser: Parser[_T]) -> Parser[_T]:
    """
    A Parser factory.

    Matches without advancing.
    """
    def inner(src: str) -> Result[_T]:
        r = parser(src)
        if not r:
            return r
        return Success(r.match, src)
    return inner

def optional(parser: Parser[_T]) -> Parser[Present[_T] | None]:
    """
    A Parser factory.

    Never fails. Produces `Present(value)` if `parser` matched, `None` (consuming nothing) otherwise.
    """
    def inner(src: str) -> Result[Present[_T] | None]:
        r = parser(src)
        if r:
            return Success(Present(r.match), r.remaining)
        return Success(None, src)
    return inner

def optional_or(parser: Parser[_T], default: _U) -> Parser[_T | _U]:
    """
    A Parser factory.

    Like `optional`, but produces the value itself, or `default` if `parser` didn't match.
    """
    def inner(src: str) -> Result[_T | _U]:
        r = parser(src)
        if r:
            return r
        return Success(default, src)
    return inner


# repetition

def _repeat(parser: Parser[_T], first: Success[_T]) -> Success[list[_T]]:
    matches = [first.match]
    remaining = first.remaining
    while True:
        r = parser(remaining)
        if not r:
            break
        matches.append(r.match)
        if len(r.remaining) >= len(remaining):
            # matched without consuming, so it would match forever
            remaining = r.remaining
            break
        remaining = r.remaining
    return Success(matches, remaining)

def many(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    A Parser factory.

    Repeatedly matches the given parser until it fails. Never fails itself.

    Stops after an iteration that matches without consuming anything.
    """
    def inner(src: str) -> Result[list[_T]]:
        r = parser(src)
        if not r:
            return Success([], src)
        if len(r.remaining) >= len(src):
            return Success([r.match], r.remaining)
        return _repeat(parser, r)
    return inner

def many1(parser: Parser[_T]) -> Parser[list[_T]]:
    """
    A Parser factory.

    Repeatedly matches the given parser until it fails. Fails with the first attempt's failure if it never matches.
    """
    def inner(src: str) -> Result[list[_T]]:
        r = parser(src)
        if not r:
            return r
        if len(r.remaining) >= len(src):
            return Success([r.match], r.remaining)
        return _repeat(parser, r)
    return inner

def transpose(parsers: Sequence[Parser[_T]]) -> Parser[list[_T]]:
    """
    A Parser factory.

    All the given parsers must match in sequence for the parser to succeed. Produces their values in order.
    """
    parsers = tuple(parsers)
    def inner(src: str) -> Result[list[_T]]:
        matches: list[_T] = []
        remaining = src
        for parser in parsers:
            r = parser(remaining)
            if not r:
                return r
            matches.append(r.match)
            remaining = r.remaining
        return Success(matches, remaining)
    return inner

def n_times(parser: Parser[_T], n: int) -> Parser[list[_T]]:
    """
    A Parser factory.

    Matches the given parser exactly `n` times in sequence.
    """
    if n < 0:
        raise ValueError("The repetition count can't be negative.")
    return transpose([parser] * n)

def sep_by1(parser: Parser[_T], separator: Parser[Any]) -> Parser[list[_T]]:
    """
    A Parser factory.

    One or more `parser` matches with `separator` between them. A trailing separator is left unconsumed.
    """
    return map_(
        concat_pair(parser, many(fold_right(separator, parser))),
        lambda p: [p.first, *p.second],
    )

def sep_by(parser: Parser[_T], separator: Parser[Any]) -> Parser[list[_T]]:
    """
    A Parser factory.

    Zero or more `parser` matches with `separator` between them.
    """
    return or_(sep_by1(parser, separator), pure([]))


# transformation

def map_(parser: Parser[_T], function: Callable[[_T], _U]) -> Parser[_U]:
    """
    A Parser factory.

    Applies `function` to the value of a successful match.
    """
    def inner(src: str) -> Result[_U]:
        r = parser(src)
        if not r:
            return r
        return Success(function(r.match), r.remaining)
    return inner

def bind(parser: Parser[_T], function: Callable[[_T], Parser[_U]]) -> Parser[_U]:
    """
    A Parser factory.

    Picks the next parser based on the value of `parser`, then runs it on what `parser` left.

    ```
    # a digit `n`, followed by `n` more characters
    counted = bind(digit(), lambda d: n_times(any_character(), int(d)))
    ```
    """
    def inner(src: str) -> Result[_U]:
        r = parser(src)
        if not r:
            return r
        return function(r.match)(r.remaining)
    return inner

def pure(value: _T) -> Parser[_T]:
    """
    A Parser factory.

    Always matches `value` without consuming anything.
    """
    return lambda src: Success(value, src)

def apply(function_parser: Parser[Callable[[_T], _U]], value_parser: Parser[_T]) -> Parser[_U]:
    """
    A Parser factory.

    Runs `function_parser`, then `value_parser`, and produces the function applied to the value.
    """
    return map_(concat_pair(function_parser, value_parser), lambda p: p.first(p.second))

def lift(function: Callable[[_T], _U]) -> Callable[[Parser[_T]], Parser[_U]]:
    """Turns a one argument function into one that takes and returns parsers."""
    return lambda parser: apply(pure(function), parser)

def lift2(function: Callable[[_T, _U], _V]) -> Callable[[Parser[_T], Parser[_U]], Parser[_V]]:
    """Turns a two argument function into one that takes and returns parsers. The parsers run left to right."""
    curried: Callable[[_T], Callable[[_U], _V]] = lambda a: lambda b: function(a, b)
    return lambda first, second: apply(apply(pure(curried), first), second)

def lazy(factory: Callable[[], Parser[_T]]) -> Parser[_T]:
    """
    A Parser factory.

    Builds the parser on first use. Lets a grammar refer to rules that are defined later, or to itself.

    ```
    def nested() -> Parser[int]:
        return or_(map_(surrounding(lazy(nested), character("("), character(")")), lambda n: n + 1), pure(0))
    ```
    """
    get = functools.cache(factory)
    return lambda src: get()(src)
