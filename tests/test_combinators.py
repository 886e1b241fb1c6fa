"""Tests for the combinators."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from parsecomb import (
    Failure,
    Pair,
    Present,
    Success,
    and_,
    any_character_from,
    any_character,
    any_integer,
    any_of,
    apply,
    before,
    bind,
    chars_to_string,
    character,
    concat,
    const,
    concat_pair,
    digit,
    fold_left,
    fold_right,
    followed_by,
    following,
    lazy,
    lift,
    lift2,
    lookahead,
    many,
    many1,
    map_,
    n_times,
    not_,
    optional,
    optional_or,
    or_,
    pure,
    sep_by,
    sep_by1,
    string,
    surrounding,
    transpose,
    ws0,
    with_,
)


def exploding(src: str):
    """A parser that must never be reached."""
    raise AssertionError("parser should not have been invoked")


def negate_sign():
    return map_(character("-"), lambda _: lambda n: -n)


class TestSequencing:
    def test_concat_keeps_second(self):
        assert concat(character("a"), character("b"))("abc") == Success("b", "c")

    def test_concat_first_failure(self):
        assert concat(character("a"), exploding)("xbc") == Failure("Expected 'a' but got 'x'")

    def test_concat_second_failure(self):
        assert concat(character("a"), character("b"))("axc") == Failure("Expected 'b' but got 'x'")

    def test_concat_pair(self):
        assert concat_pair(character("a"), any_integer())("a12z") == Success(Pair("a", 12), "z")

    def test_with_is_concat_pair(self):
        assert with_ is concat_pair

    def test_concat_pair_failure(self):
        assert concat_pair(character("a"), character("b"))("a") == Failure("Expected 'b' but got end of input")

    def test_fold_left_keeps_first(self):
        assert fold_left(any_integer(), character(";"))("12;x") == Success(12, "x")
        assert followed_by(any_integer(), character(";"))("12;x") == Success(12, "x")

    def test_fold_left_trailing_failure(self):
        assert fold_left(any_integer(), character(";"))("12x") == Failure("Expected ';' but got 'x'")

    def test_fold_right_keeps_second(self):
        assert fold_right(character("#"), any_integer())("#7 ") == Success(7, " ")
        assert before(character("#"), any_integer())("#7 ") == Success(7, " ")
        assert following(character("#"), any_integer())("#7 ") == Success(7, " ")

    def test_fold_right_leading_failure(self):
        assert fold_right(character("#"), exploding)("7") == Failure("Expected '#' but got '7'")


class TestSurrounding:
    def test_single_delimiter(self):
        parser = surrounding(any_integer(), character('"'))
        assert parser('"54321"asdf') == Success(54321, "asdf")

    def test_missing_left_delimiter(self):
        parser = surrounding(any_integer(), character('"'))
        assert parser('a"abab') == Failure("Expected '\"' but got 'a'")

    def test_missing_right_delimiter(self):
        parser = surrounding(any_integer(), character('"'))
        assert parser('"12') == Failure("Expected '\"' but got end of input")

    def test_two_delimiters(self):
        parser = surrounding(any_integer(), character("("), character(")"))
        assert parser("(-3))") == Success(-3, ")")


class TestAlternation:
    def test_or_first_wins(self):
        assert or_(character("a"), exploding)("ab") == Success("a", "b")

    def test_or_falls_back_on_original_input(self):
        assert or_(string("ab"), string("ac"))("acd") == Success("ac", "d")

    def test_or_reports_last_failure(self):
        assert or_(character("a"), character("b"))("c") == Failure("Expected 'b' but got 'c'")

    def test_any_of(self):
        parser = any_of([character("a"), character("b"), character("c")])
        assert parser("cab") == Success("c", "ab")
        assert parser("d") == Failure("Expected 'c' but got 'd'")

    def test_any_of_single(self):
        assert any_of([character("a")])("a") == Success("a", "")

    def test_any_of_empty(self):
        with pytest.raises(ValueError):
            any_of([])

    def test_and_reparses_from_start(self):
        assert and_(character("a"), character("a"))("abbb") == Success("a", "bbb")

    def test_and_gate_failure(self):
        assert and_(character("a"), exploding)("bbb") == Failure("Expected 'a' but got 'b'")

    def test_and_second_failure(self):
        assert and_(character("a"), string("ab"))("aa") == Failure("Expected 'b' but got 'a'")

    def test_and_second_sees_original_input(self):
        assert and_(string("ab"), any_character())("abc") == Success("a", "bc")

    def test_not_succeeds_without_consuming(self):
        assert not_(character("a"), lambda ch: f"unexpected {ch}")("bc") == Success(None, "bc")

    def test_not_fails_with_mapped_message(self):
        assert not_(any_integer(), lambda n: f"unexpected {n}")("42") == Failure("unexpected 42")

    def test_lookahead(self):
        assert lookahead(string("ab"))("abc") == Success("ab", "abc")
        assert lookahead(string("ab"))("b") == Failure("Expected 'a' but got 'b'")


class TestOptional:
    def test_present(self):
        assert optional(character("-"))("-1") == Success(Present("-"), "1")

    def test_absent(self):
        assert optional(character("-"))("1") == Success(None, "1")

    def test_absent_on_empty(self):
        assert optional(character("-"))("") == Success(None, "")

    def test_optional_or(self):
        assert optional_or(any_integer(), 0)("7x") == Success(7, "x")
        assert optional_or(any_integer(), 0)("x") == Success(0, "x")


class TestRepetition:
    def test_many_all(self):
        assert many(character("a"))("aaaaa") == Success(["a"] * 5, "")

    def test_many_partial(self):
        assert many(character("a"))("aaabb") == Success(["a"] * 3, "bb")

    def test_many_none(self):
        assert many(character("a"))("bbbbb") == Success([], "bbbbb")

    def test_many_empty_input(self):
        assert many(character("a"))("") == Success([], "")

    def test_many_stops_when_nothing_is_consumed(self):
        assert many(pure(1))("abc") == Success([1], "abc")

    def test_many_is_stack_safe(self):
        src = "a" * 20_000
        assert many(character("a"))(src) == Success(["a"] * 20_000, "")

    def test_many1_is_stack_safe(self):
        src = "a" * 20_000 + "b"
        assert many1(character("a"))(src) == Success(["a"] * 20_000, "b")

    def test_n_times_is_stack_safe(self):
        src = "a" * 20_001
        assert n_times(character("a"), 20_000)(src) == Success(["a"] * 20_000, "a")

    def test_long_string_is_stack_safe(self):
        src = "a" * 20_000
        assert string(src)(src + "!") == Success(src, "!")

    def test_many1_all(self):
        assert many1(character("a"))("aaaaa") == Success(["a"] * 5, "")

    def test_many1_partial(self):
        assert many1(character("a"))("aaabb") == Success(["a"] * 3, "bb")

    def test_many1_empty(self):
        assert many1(character("a"))("") == Failure("Expected 'a' but got end of input")

    def test_many1_none(self):
        assert many1(character("a"))("b") == Failure("Expected 'a' but got 'b'")

    def test_n_times(self):
        assert n_times(digit(), 3)("12345") == Success(["1", "2", "3"], "45")

    def test_n_times_zero(self):
        assert n_times(exploding, 0)("abc") == Success([], "abc")

    def test_n_times_too_few(self):
        assert n_times(digit(), 3)("12a") == Failure("Expected a digit but got 'a'")

    def test_n_times_negative(self):
        with pytest.raises(ValueError):
            n_times(digit(), -1)

    def test_transpose(self):
        parser = transpose([string("ab"), string("c"), map_(any_integer(), str)])
        assert parser("abc12!") == Success(["ab", "c", "12"], "!")

    def test_transpose_fails_fast(self):
        parser = transpose([character("a"), character("b"), exploding])
        assert parser("ac") == Failure("Expected 'b' but got 'c'")

    def test_transpose_empty(self):
        assert transpose([])("abc") == Success([], "abc")

    def test_sep_by(self):
        parser = sep_by(any_integer(), character(","))
        assert parser("1,-2,3;") == Success([1, -2, 3], ";")
        assert parser(";") == Success([], ";")

    def test_sep_by_leaves_trailing_separator(self):
        assert sep_by1(any_integer(), character(","))("1,2,") == Success([1, 2], ",")

    def test_sep_by1_requires_one(self):
        assert sep_by1(any_integer(), character(","))("x") == Failure("Expected a digit but got 'x'")


class TestTransformation:
    def test_map(self):
        assert map_(any_integer(), lambda n: n * 2)("21x") == Success(42, "x")

    def test_map_failure_passes_through(self):
        assert map_(character("a"), str.upper)("b") == Failure("Expected 'a' but got 'b'")

    def test_bind_uses_value(self):
        counted = bind(digit(), lambda d: n_times(any_character(), int(d)))
        assert counted("3abcde") == Success(["a", "b", "c"], "de")
        assert counted("0abc") == Success([], "abc")

    def test_bind_failure(self):
        assert bind(digit(), lambda d: exploding)("x") == Failure("Expected a digit but got 'x'")

    def test_pure(self):
        assert pure(42)("abc") == Success(42, "abc")

    def test_apply(self):
        parser = apply(negate_sign(), any_integer())
        assert parser("-5!") == Success(-5, "!")

    def test_apply_function_failure(self):
        assert apply(negate_sign(), any_integer())("5") == Failure("Expected '-' but got '5'")

    def test_lift(self):
        assert lift(abs)(any_integer())("-8") == Success(8, "")

    def test_lift2(self):
        add = lift2(lambda a, b: a + b)
        parser = add(any_integer(), fold_right(character("+"), any_integer()))
        assert parser("2+3=") == Success(5, "=")


class TestLazy:
    def test_recursive_grammar(self):
        def nested():
            return or_(
                map_(surrounding(lazy(nested), character("("), character(")")), lambda n: n + 1),
                pure(0),
            )
        parser = nested()
        assert parser("((()))x") == Success(3, "x")
        assert parser("(()") == Success(0, "(()")

    def test_factory_called_once(self):
        calls = []
        def factory():
            calls.append(1)
            return character("a")
        parser = lazy(factory)
        assert calls == []
        parser("a")
        parser("a")
        assert calls == [1]


def key_value_pairs():
    key = map_(many1(any_character_from(const.ALPHABETIC)), chars_to_string)
    pair = concat_pair(fold_left(key, character("=")), any_integer())
    return sep_by(pair, surrounding(character(","), ws0()))


def nested_lists():
    def items():
        return surrounding(sep_by(or_(any_integer(), lazy(items)), character(",")), character("["), character("]"))
    return items()


class TestGrammars:
    def test_key_value_pairs(self):
        parser = key_value_pairs()
        assert parser("a=1, bc=-2 ,d=0;") == Success([Pair("a", 1), Pair("bc", -2), Pair("d", 0)], ";")

    def test_key_value_pairs_rejects_digit_keys(self):
        assert key_value_pairs()("1=2") == Success([], "1=2")

    def test_nested_lists(self):
        assert nested_lists()("[1,[2,[]],-3]") == Success([1, [2, []], -3], "")

    def test_concurrent_invocations(self):
        parser = nested_lists()
        inputs = [f"[{i},[{i},[{-i}]],{i * 7}]" for i in range(200)] + ["[1,", "[[x]]"]
        expected = [parser(src) for src in inputs]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(parser, inputs))
        assert results == expected
        assert expected[0] == Success([0, [0, [0]], 0], "")
        assert not expected[-1]
