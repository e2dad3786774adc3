"""Lexical shape of dice notation.

    expression := [sign] group (("+" | "-") group)*
    group      := dieGroup | integer
    dieGroup   := [count] "d" sides

The tokenizer only classifies fragments; bounds and structure are checked
by the parser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Literal, TypeAlias


TokenKind: TypeAlias = Literal["dice", "integer", "operator", "invalid"]

# A die group may carry whitespace around its "d" ("2 d 6"), but must end at
# a non-alphanumeric. Any other alphanumeric run is classified as a whole, so
# "2d" or "d20x" surface as one malformed fragment instead of being split into
# valid-looking pieces.
_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<dice>(?P<count>[0-9]*)\s*[dD]\s*(?P<sides>[0-9]+))(?![0-9A-Za-z])"
    r"|(?P<word>[0-9A-Za-z]+)"
    r"|(?P<op>[+-])"
    r"|(?P<other>\S))"
)

_INTEGER_RE = re.compile(r"^[0-9]+$")

# Numbers longer than this are out of range for every limit; they are clamped
# before int() so pathological input never reaches the str->int digit limit.
_MAX_DIGITS = 12

# Boundaries reject any Unicode alphanumeric neighbour; digits are ASCII only,
# matching what the tokenizer accepts.
_SCAN_GROUP = r"(?:[0-9]*d[0-9]+|[0-9]+)"
SCAN_RE = re.compile(
    r"(?<![^\W_])"
    r"[0-9]*d[0-9]+"
    rf"(?:[ \t]*[+-][ \t]*{_SCAN_GROUP})*"
    r"(?![^\W_])",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    count: int = 0
    sides: int = 0
    value: int = 0


def to_int(digits: str) -> int:
    if len(digits) > _MAX_DIGITS:
        digits = "9" * _MAX_DIGITS
    return int(digits)


def _classify(word: str, start: int) -> Token:
    if _INTEGER_RE.match(word):
        return Token(kind="integer", text=word, start=start, value=to_int(word))
    return Token(kind="invalid", text=word, start=start)


def tokenize(text: str) -> Iterator[Token]:
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            # Only trailing whitespace is left.
            return
        pos = m.end()
        if m.group("dice") is not None:
            count_str = m.group("count")
            yield Token(
                kind="dice",
                text=m.group("dice"),
                start=m.start("dice"),
                count=to_int(count_str) if count_str else 1,
                sides=to_int(m.group("sides")),
            )
        elif m.group("word") is not None:
            yield _classify(m.group("word"), m.start("word"))
        elif m.group("op") is not None:
            yield Token(kind="operator", text=m.group("op"), start=m.start("op"))
        else:
            yield Token(kind="invalid", text=m.group("other"), start=m.start("other"))
