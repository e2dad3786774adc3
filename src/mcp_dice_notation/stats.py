from __future__ import annotations

from .models import DiceExpression, RollType


def dice_range(expr: DiceExpression) -> tuple[int, int]:
    """Lowest and highest possible totals of a normal roll."""
    low = sum(g.count for g in expr.groups) + expr.modifier
    high = sum(g.count * g.sides for g in expr.groups) + expr.modifier
    return low, high


def dice_average(expr: DiceExpression) -> float:
    return sum(g.count * (g.sides + 1) / 2 for g in expr.groups) + expr.modifier


def is_roll_type_eligible(expr: DiceExpression, roll_type: RollType) -> bool:
    # A d20 base die is a check die: it never takes advantage or crits.
    if roll_type == "normal":
        return True
    return expr.groups[0].sides != 20
