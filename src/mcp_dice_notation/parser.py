from __future__ import annotations

import logging
from typing import TypeAlias

from .errors import (
    CountOutOfRange,
    DiceError,
    EmptyInput,
    MalformedGroup,
    ModifierOutOfRange,
    NoDiceGroupsFound,
    SidesOutOfRange,
    ValidationError,
)
from .grammar import Token, tokenize
from .models import DEFAULT_LIMITS, DiceExpression, DiceLimits, DieGroup


logger = logging.getLogger(__name__)

ParseResult: TypeAlias = DiceExpression | ValidationError


def _check_group(tok: Token, limits: DiceLimits) -> ValidationError | None:
    if tok.count < 1 or tok.count > limits.max_count:
        return CountOutOfRange(group=tok.text, count=tok.count, maximum=limits.max_count)
    if tok.sides < 2 or tok.sides > limits.max_sides:
        return SidesOutOfRange(group=tok.text, sides=tok.sides, maximum=limits.max_sides)
    return None


def _parse_trimmed(text: str, limits: DiceLimits) -> ParseResult:
    groups: list[DieGroup] = []
    modifier = 0
    pending: Token | None = None
    seen_group = False

    for tok in tokenize(text):
        if tok.kind == "invalid":
            return MalformedGroup(tok.text)

        if tok.kind == "operator":
            if pending is not None:
                # "++", "+-", "+ +": report the whole operator run.
                return MalformedGroup(text[pending.start : tok.start + 1])
            pending = tok
            continue

        if seen_group and pending is None:
            # Two groups with no operator between them, e.g. "2d6 3".
            return MalformedGroup(tok.text)

        sign = -1 if pending is not None and pending.text == "-" else 1
        fragment = text[pending.start : tok.start + len(tok.text)] if pending else tok.text
        pending = None
        seen_group = True

        if tok.kind == "dice":
            if sign < 0:
                return MalformedGroup(fragment)
            err = _check_group(tok, limits)
            if err is not None:
                return err
            groups.append(DieGroup(count=tok.count, sides=tok.sides))
        else:
            modifier += sign * tok.value

    if pending is not None:
        return MalformedGroup(pending.text)

    if not groups:
        return NoDiceGroupsFound()

    if abs(modifier) > limits.max_modifier:
        return ModifierOutOfRange(value=modifier, maximum=limits.max_modifier)

    return DiceExpression(groups=tuple(groups), modifier=modifier, original_text=text)


def parse(text: str, limits: DiceLimits = DEFAULT_LIMITS) -> ParseResult:
    """Parse dice notation into a DiceExpression, or return the ValidationError.

    Parse failures are values so that malformed user input never escapes as an
    exception; use ``parse_expression`` for the raising form.
    """
    if not text or not text.strip():
        return EmptyInput()

    result = _parse_trimmed(text.strip(), limits)
    if isinstance(result, ValidationError):
        logger.debug("Rejected dice notation %r: %s", text, result.code)
    return result


def parse_expression(text: str, limits: DiceLimits = DEFAULT_LIMITS) -> DiceExpression:
    result = parse(text, limits)
    if isinstance(result, ValidationError):
        raise DiceError(result)
    return result


def format_expression(expr: DiceExpression) -> str:
    """Canonical rendering, e.g. ``d20 + 2d6 - 1``."""
    chunks: list[str] = []

    for group in expr.groups:
        piece = f"{group.count}d{group.sides}" if group.count != 1 else f"d{group.sides}"
        chunks.append(f"+ {piece}" if chunks else piece)

    if expr.modifier > 0:
        chunks.append(f"+ {expr.modifier}")
    elif expr.modifier < 0:
        chunks.append(f"- {abs(expr.modifier)}")

    return " ".join(chunks)
