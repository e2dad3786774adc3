"""Rolls a parsed DiceExpression under a roll type.

The evaluator never decides eligibility: advantage, disadvantage and critical
are applied to any expression it is given. Whether a roll type is allowed for
an expression is checked by callers (see ``stats.is_roll_type_eligible``).
"""

from __future__ import annotations

import logging
import secrets
from typing import Protocol

from .errors import RngFailure
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
    SingleDieRoll,
)


logger = logging.getLogger(__name__)

# Sides of the synthetic dice added for advantage/disadvantage.
BONUS_DIE_SIDES = 6


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def system_random() -> RandomSource:
    return secrets.SystemRandom()


def roll_die(sides: int, rng: RandomSource) -> SingleDieRoll:
    try:
        value = rng.randint(1, sides)
    except Exception as e:
        logger.warning("Randomness source failed rolling d%d: %s", sides, e)
        raise RngFailure(f"Randomness source failed rolling d{sides}: {e}") from e

    if not isinstance(value, int) or not 1 <= value <= sides:
        raise RngFailure(f"Randomness source returned {value!r} for a d{sides}")
    return SingleDieRoll(sides=sides, value=value)


def roll_dice(count: int, sides: int, rng: RandomSource) -> tuple[SingleDieRoll, ...]:
    return tuple(roll_die(sides, rng) for _ in range(count))


def _critical_entries(
    expr: DiceExpression, rng: RandomSource, policy: CriticalPolicy
) -> list[BreakdownEntry]:
    entries: list[BreakdownEntry] = []
    for i, group in enumerate(expr.groups):
        if policy == "max_face" and i == 0:
            # Base group: roll it once and take the second set at max face.
            rolls = roll_dice(group.count, group.sides, rng)
            entries.append(CriticalEntry(group=group, rolls=rolls, bonus=group.count * group.sides))
        else:
            rolls = roll_dice(group.count * 2, group.sides, rng)
            entries.append(CriticalEntry(group=group, rolls=rolls))
    return entries


def evaluate(
    expr: DiceExpression,
    roll_type: RollType = "normal",
    rng: RandomSource | None = None,
    critical_policy: CriticalPolicy = "double",
) -> RollResult:
    """Roll ``expr`` and return a fresh RollResult.

    Raises:
        RngFailure: If the randomness source fails or returns an impossible face.
        ValueError: If ``roll_type`` is not a known roll type.
    """
    if rng is None:
        rng = system_random()

    breakdown: list[BreakdownEntry]

    if roll_type == "critical":
        breakdown = _critical_entries(expr, rng, critical_policy)
    elif roll_type in ("normal", "advantage", "disadvantage"):
        breakdown = [
            GroupEntry(group=group, rolls=roll_dice(group.count, group.sides, rng))
            for group in expr.groups
        ]
        if roll_type == "advantage":
            breakdown.append(AdvantageEntry(rolls=roll_dice(2, BONUS_DIE_SIDES, rng)))
        elif roll_type == "disadvantage":
            breakdown.append(DisadvantageEntry(rolls=roll_dice(2, BONUS_DIE_SIDES, rng)))
    else:
        raise ValueError(f"Unknown roll type: {roll_type!r}")

    result = RollResult(expression=expr, roll_type=roll_type, breakdown=tuple(breakdown))
    logger.debug(
        "Rolled %r (%s): %s => %d",
        expr.original_text,
        roll_type,
        [entry.values for entry in result.breakdown],
        result.total,
    )
    return result


def _base_entries(result: RollResult) -> list[GroupEntry]:
    """The declared groups' original dice, without synthetic or doubled dice."""
    base: list[GroupEntry] = []
    for entry in result.breakdown:
        if isinstance(entry, GroupEntry):
            base.append(entry)
        elif isinstance(entry, CriticalEntry):
            base.append(GroupEntry(group=entry.group, rolls=entry.rolls[: entry.group.count]))
    return base


def apply_roll_type(
    result: RollResult,
    roll_type: RollType,
    rng: RandomSource | None = None,
    critical_policy: CriticalPolicy = "double",
) -> RollResult:
    """Re-apply a roll type to an existing roll, keeping its declared dice.

    Advantage and disadvantage replace each other; critical is exclusive with
    both, so switching between them returns ``result`` unchanged, as does
    applying the roll type it already has. ``"normal"`` strips synthetic and
    doubled dice.
    """
    if roll_type not in ("normal", "advantage", "disadvantage", "critical"):
        raise ValueError(f"Unknown roll type: {roll_type!r}")
    if result.roll_type == roll_type:
        return result
    if "critical" in (result.roll_type, roll_type) and "normal" not in (result.roll_type, roll_type):
        logger.debug("Refusing to switch %s roll to %s", result.roll_type, roll_type)
        return result

    if rng is None:
        rng = system_random()

    base = _base_entries(result)
    breakdown: list[BreakdownEntry]

    if roll_type == "critical":
        breakdown = []
        for i, entry in enumerate(base):
            group = entry.group
            if critical_policy == "max_face" and i == 0:
                breakdown.append(
                    CriticalEntry(group=group, rolls=entry.rolls, bonus=group.count * group.sides)
                )
            else:
                extra = roll_dice(group.count, group.sides, rng)
                breakdown.append(CriticalEntry(group=group, rolls=entry.rolls + extra))
    else:
        breakdown = list(base)
        if roll_type == "advantage":
            breakdown.append(AdvantageEntry(rolls=roll_dice(2, BONUS_DIE_SIDES, rng)))
        elif roll_type == "disadvantage":
            breakdown.append(DisadvantageEntry(rolls=roll_dice(2, BONUS_DIE_SIDES, rng)))

    return RollResult(expression=result.expression, roll_type=roll_type, breakdown=tuple(breakdown))
