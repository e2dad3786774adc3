from __future__ import annotations

import uuid
from typing import Any

from .config import settings
from .errors import DiceError, ValidationError
from .evaluator import RandomSource, evaluate
from .models import (
    AdvantageEntry,
    BreakdownEntry,
    CriticalEntry,
    CriticalPolicy,
    DiceExpression,
    DisadvantageEntry,
    GroupEntry,
    RollResult,
    RollType,
)
from .parser import ParseResult, format_expression, parse
from .scanner import extract_expressions


def validate(text: str) -> ParseResult:
    """DiceExpression on success, otherwise the ValidationError value."""
    return parse(text, settings.limits)


def validate_many(texts: list[str]) -> list[ParseResult]:
    return [validate(text) for text in texts]


def is_expression(text: str) -> bool:
    return isinstance(validate(text), DiceExpression)


def scan(text: str) -> list[str]:
    return [span.text for span in extract_expressions(text)]


def roll(
    expression: DiceExpression | str,
    roll_type: RollType = "normal",
    rng: RandomSource | None = None,
    critical_policy: CriticalPolicy | None = None,
) -> RollResult:
    """Roll a parsed expression, or parse-then-roll a notation string.

    Raises:
        DiceError: If ``expression`` is a string that fails validation.
        RngFailure: If the randomness source fails.
    """
    if isinstance(expression, str):
        parsed = validate(expression)
        if isinstance(parsed, ValidationError):
            raise DiceError(parsed)
        expression = parsed

    return evaluate(
        expression,
        roll_type,
        rng=rng,
        critical_policy=critical_policy or settings.critical_policy,
    )


def _entry_to_dict(entry: BreakdownEntry) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": entry.kind,
        "label": entry.label,
        "rolls": list(entry.values),
        "extremal": [r.is_extremal for r in entry.rolls],
        "subtotal": entry.subtotal,
    }
    if isinstance(entry, (GroupEntry, CriticalEntry)):
        out["count"] = entry.group.count
        out["sides"] = entry.group.sides
    if isinstance(entry, CriticalEntry) and entry.bonus:
        out["bonus"] = entry.bonus
    if isinstance(entry, AdvantageEntry):
        out["kept"] = [max(entry.values)]
    elif isinstance(entry, DisadvantageEntry):
        out["kept"] = [min(entry.values)]
    return out


def _explain(result: RollResult) -> str:
    parts: list[str] = []
    for entry in result.breakdown:
        if isinstance(entry, AdvantageEntry):
            parts.append(f"advantage: rolls {list(entry.values)} -> add {entry.subtotal}")
        elif isinstance(entry, DisadvantageEntry):
            parts.append(f"disadvantage: rolls {list(entry.values)} -> subtract {-entry.subtotal}")
        elif isinstance(entry, CriticalEntry):
            bonus = f" + max {entry.bonus}" if entry.bonus else ""
            parts.append(f"critical {entry.group.notation}: rolls {list(entry.values)}{bonus} => {entry.subtotal}")
        else:
            parts.append(f"{entry.label}: rolls {list(entry.values)} => {entry.subtotal}")

    if result.modifier:
        parts.append(f"{result.modifier:+d}")

    return "; ".join(parts) + f" => {result.total}"


def result_to_dict(result: RollResult) -> dict[str, Any]:
    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": result.timestamp.replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "input": result.expression.original_text,
        "normalized_expression": format_expression(result.expression),
        "roll_type": result.roll_type,
        "terms": [_entry_to_dict(entry) for entry in result.breakdown],
        "modifier": result.modifier,
        "total": result.total,
        "explanation": _explain(result),
    }


def roll_from_text(
    text: str,
    roll_type: RollType = "normal",
    rng: RandomSource | None = None,
) -> dict[str, Any]:
    """Parse, validate, then roll. Raises DiceError for invalid input."""
    result = roll(text, roll_type, rng=rng)
    out = result_to_dict(result)
    out["rng"] = {
        "source": type(rng).__name__ if rng is not None else "secrets.SystemRandom",
        "nonce": str(uuid.uuid4()),
    }
    return out
