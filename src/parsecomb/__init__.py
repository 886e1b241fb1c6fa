"""
Parser combinators over strings.

A parser is any function that takes the remaining input and returns either a `Success` or a `Failure`.
The combinators build bigger parsers out of smaller ones. See the `parsecomb.general` module for parsers
built this way that you can use as examples.

Defining parsers:
```
key = map_(many1(any_character_from(const.ALPHABETIC)), chars_to_string)
pair = concat_pair(fold_left(key, character("=")), any_integer())
pairs = sep_by(pair, surrounding(character(","), ws0()))
```

Using parsers:
```
result = pairs("a=1, b=-2")
if result:
    ... # `result` is a `Success`: `result.match`, `result.remaining`
else:
    ... # `result` is a `Failure`: `result.message`

data = parse_all(pairs, "a=1, b=-2")    # raises `ParseError` on failure or trailing input
```
"""

import logging

import parsecomb.const as const
from parsecomb.main import (
    ParseError,
    Success,
    Failure,
    Result,
    Pair,
    Present,
    Parser,
    run,
    parse_all,
    chars_to_string,
)
from parsecomb.combinators import (
    concat,
    concat_pair,
    with_,
    fold_left,
    followed_by,
    fold_right,
    before,
    following,
    surrounding,
    or_,
    any_of,
    and_,
    not_,
    lookahead,
    optional,
    optional_or,
    many,
    many1,
    transpose,
    n_times,
    sep_by,
    sep_by1,
    map_,
    bind,
    pure,
    apply,
    lift,
    lift2,
    lazy,
)
from parsecomb.general import (
    character_satisfies,
    character,
    not_character,
    any_character,
    any_character_from,
    whitespace_character,
    digit,
    string,
    literal_anycase,
    regex,
    until_character,
    ws0,
    ws1,
    no_more_input,
    any_integer,
    quoted_string,
)
import parsecomb.general as general

# stays silent unless the host application configures logging
logging.getLogger("parsecomb").addHandler(logging.NullHandler())
