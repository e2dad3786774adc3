"""Locates dice notation embedded in free text.

Spans are only candidates: each one still has to go through the parser
before it is treated as rollable.
"""

from __future__ import annotations

from dataclasses import dataclass

from .grammar import SCAN_RE
from .models import DEFAULT_LIMITS, DiceExpression, DiceLimits
from .parser import parse


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    text: str


def extract_expressions(text: str) -> list[Span]:
    """Leftmost-first, greedy, non-overlapping matches bounded by non-alphanumerics."""
    if not text:
        return []
    return [Span(start=m.start(), end=m.end(), text=m.group(0)) for m in SCAN_RE.finditer(text)]


def find_rollable(
    text: str, limits: DiceLimits = DEFAULT_LIMITS
) -> list[tuple[Span, DiceExpression]]:
    found: list[tuple[Span, DiceExpression]] = []
    for span in extract_expressions(text):
        parsed = parse(span.text, limits)
        if isinstance(parsed, DiceExpression):
            found.append((span, parsed))
    return found
