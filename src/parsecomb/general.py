"""
General purpose parsers, built from the combinators.
"""

from __future__ import annotations
from typing import Callable

from collections.abc import Iterable, Mapping
import re

import parsecomb.const as const
from parsecomb.main import Success, Failure, Result, Pair, Present, Parser, chars_to_string
from parsecomb.combinators import (
    transpose,
    or_,
    not_,
    lookahead,
    optional,
    many,
    many1,
    map_,
    concat_pair,
    fold_left,
    fold_right,
    surrounding,
)


# characters

def character_satisfies(
    predicate: Callable[[str], bool],
    on_mismatch: Callable[[str], str],
    on_empty: Callable[[], str],
) -> Parser[str]:
    """
    Matches a single character if `predicate` holds for it.

    `on_mismatch`: Builds the failure message from the character that didn't satisfy the predicate.
    `on_empty`: Builds the failure message when there's no input left.
    """
    def inner(src: str) -> Result[str]:
        if not src:
            return Failure(on_empty())
        ch = src[0]
        if not predicate(ch):
            return Failure(on_mismatch(ch))
        return Success(ch, src[1:])
    return inner

def character(value: str) -> Parser[str]:
    """Matches exactly `value`, which must be a single character."""
    if len(value) != 1:
        raise ValueError("Expected a single character.")
    return character_satisfies(
        lambda ch: ch == value,
        lambda ch: f"Expected {value!r} but got {ch!r}",
        lambda: f"Expected {value!r} but got end of input",
    )

def not_character(value: str) -> Parser[str]:
    """Matches any character other than `value`, which must be a single character."""
    if len(value) != 1:
        raise ValueError("Expected a single character.")
    return character_satisfies(
        lambda ch: ch != value,
        lambda ch: f"Expected any character except {value!r} but got {ch!r}",
        lambda: f"Expected any character except {value!r} but got end of input",
    )

def any_character() -> Parser[str]:
    return character_satisfies(
        lambda ch: True,
        lambda ch: f"Expected any character but got {ch!r}",
        lambda: "Expected any character but got end of input",
    )

def _class_matcher(members: frozenset[str], name: str) -> Parser[str]:
    return character_satisfies(
        lambda ch: ch in members,
        lambda ch: f"Expected {name} but got {ch!r}",
        lambda: f"Expected {name} but got end of input",
    )

def any_character_from(chars: Iterable[str]) -> Parser[str]:
    """Matches a character that's a member of `chars`."""
    members = frozenset(chars)
    return _class_matcher(members, f"one of {''.join(sorted(members))!r}")

def whitespace_character() -> Parser[str]:
    """Matches one of space, tab, newline, carriage return and form feed."""
    return _class_matcher(const.WHITESPACES, "whitespace")

def digit() -> Parser[str]:
    """Matches a single decimal digit."""
    return _class_matcher(const.DECIMAL, "a digit")


# strings

def string(value: str) -> Parser[str]:
    """
    Matches the given string. Case sensitive.

    Fails with the message of the first character that didn't match.
    """
    return map_(transpose([character(ch) for ch in value]), chars_to_string)

def literal_anycase(value: str) -> Parser[str]:
    """
    Matches the given string. Not case sensitive.

    Produces the characters as they appear in the input.
    """
    def char_anycase(expected: str) -> Parser[str]:
        return character_satisfies(
            lambda ch: ch.lower() == expected.lower(),
            lambda ch: f"Expected {expected!r} (any case) but got {ch!r}",
            lambda: f"Expected {expected!r} (any case) but got end of input",
        )
    return map_(transpose([char_anycase(ch) for ch in value]), chars_to_string)

def regex(pattern: str | re.Pattern[str], flags: int | re.RegexFlag = 0) -> Parser[str]:
    """Matches the regex at the start of the input. Produces the matched text."""
    compiled = re.compile(pattern, flags)
    def inner(src: str) -> Result[str]:
        m = compiled.match(src)
        if m is None:
            got = repr(src[0]) if src else "end of input"
            return Failure(f"Expected a match for /{compiled.pattern}/ but got {got}")
        return Success(m.group(), src[m.end():])
    return inner

def until_character(value: str) -> Parser[str]:
    """
    Matches everything before the first `value`. The `value` itself isn't consumed.

    Fails if `value` doesn't occur in the rest of the input.
    """
    return fold_left(
        map_(many(not_character(value)), chars_to_string),
        lookahead(character(value)),
    )

def ws0() -> Parser[str]:
    """Matches zero or more whitespaces."""
    return map_(many(whitespace_character()), chars_to_string)

def ws1() -> Parser[str]:
    """Matches one or more whitespaces."""
    return map_(many1(whitespace_character()), chars_to_string)

def no_more_input() -> Parser[str]:
    """Matches the end of the input. Produces an empty string."""
    return map_(
        not_(any_character(), lambda ch: f"Expected end of input but got {ch!r}"),
        lambda _: "",
    )


# numbers

def _apply_sign(p: Pair[Present[str] | None, int]) -> int:
    sign, magnitude = p
    return magnitude if sign is None else -magnitude

def any_integer() -> Parser[int]:
    """
    Matches an optional `-` followed by either a lone `0` or a run of digits.

    The lone `0` is tried first, so `"0123"` matches `0` and leaves `"123"`.
    """
    magnitude = or_(
        map_(character("0"), int),
        map_(many1(digit()), lambda digits: int(chars_to_string(digits))),
    )
    return map_(concat_pair(optional(character("-")), magnitude), _apply_sign)


# quoted strings

def quoted_string(
    quote: str = '"',
    escape: str = '\\',
    escapes: Mapping[str, str] = const.ESCAPES,
) -> Parser[str]:
    """
    Matches a string between two `quote` characters. Produces the content with escapes resolved.

    `escapes`: Maps the character after `escape` to what it stands for. Any other escaped character stands for itself.
    """
    escaped = fold_right(
        character(escape),
        map_(
            character_satisfies(
                lambda ch: True,
                lambda ch: f"Expected a character to escape but got {ch!r}",
                lambda: f"Expected a character to escape after {escape!r} but got end of input",
            ),
            lambda ch: escapes.get(ch, ch),
        ),
    )
    plain = character_satisfies(
        lambda ch: ch != quote and ch != escape,
        lambda ch: f"Expected a string character but got {ch!r}",
        lambda: f"Expected closing {quote!r} but got end of input",
    )
    body = map_(many(or_(escaped, plain)), chars_to_string)
    return surrounding(body, character(quote))
