from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, TypeAlias


RollType: TypeAlias = Literal["normal", "advantage", "disadvantage", "critical"]
CriticalPolicy: TypeAlias = Literal["double", "max_face"]

ROLL_TYPES: tuple[RollType, ...] = ("normal", "advantage", "disadvantage", "critical")


@dataclass(frozen=True)
class DiceLimits:
    max_count: int = 100
    max_sides: int = 1000
    max_modifier: int = 9999


DEFAULT_LIMITS = DiceLimits()


@dataclass(frozen=True)
class DieGroup:
    count: int
    sides: int

    @property
    def notation(self) -> str:
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class DiceExpression:
    """Parsed dice notation: die groups in input order plus one flat modifier.

    ``original_text`` is the trimmed input exactly as typed, so ``2D6+3`` is
    displayed as ``2D6+3`` even though it parses the same as ``2d6 + 3``.
    """

    groups: tuple[DieGroup, ...]
    modifier: int
    original_text: str

    def __post_init__(self) -> None:
        if not self.groups:
            raise ValueError("DiceExpression requires at least one die group")


@dataclass(frozen=True)
class SingleDieRoll:
    sides: int
    value: int

    @property
    def is_extremal(self) -> bool:
        return self.value == 1 or self.value == self.sides


def _values(rolls: tuple[SingleDieRoll, ...]) -> tuple[int, ...]:
    return tuple(r.value for r in rolls)


@dataclass(frozen=True)
class GroupEntry:
    group: DieGroup
    rolls: tuple[SingleDieRoll, ...]
    kind: Literal["group"] = field(default="group", init=False)

    @property
    def label(self) -> str:
        return self.group.notation

    @property
    def values(self) -> tuple[int, ...]:
        return _values(self.rolls)

    @property
    def subtotal(self) -> int:
        return sum(self.values)


@dataclass(frozen=True)
class AdvantageEntry:
    """Two synthetic d6; the higher one is added."""

    rolls: tuple[SingleDieRoll, ...]
    kind: Literal["advantage"] = field(default="advantage", init=False)

    @property
    def label(self) -> str:
        return "advantage"

    @property
    def values(self) -> tuple[int, ...]:
        return _values(self.rolls)

    @property
    def subtotal(self) -> int:
        return max(self.values)


@dataclass(frozen=True)
class DisadvantageEntry:
    """Two synthetic d6; the lower one is subtracted. Face values stay positive."""

    rolls: tuple[SingleDieRoll, ...]
    kind: Literal["disadvantage"] = field(default="disadvantage", init=False)

    @property
    def label(self) -> str:
        return "disadvantage"

    @property
    def values(self) -> tuple[int, ...]:
        return _values(self.rolls)

    @property
    def subtotal(self) -> int:
        return -min(self.values)


@dataclass(frozen=True)
class CriticalEntry:
    group: DieGroup
    rolls: tuple[SingleDieRoll, ...]
    # Max-face dice granted without rolling (only under the "max_face" policy).
    bonus: int = 0
    kind: Literal["critical"] = field(default="critical", init=False)

    @property
    def label(self) -> str:
        return "critical"

    @property
    def values(self) -> tuple[int, ...]:
        return _values(self.rolls)

    @property
    def subtotal(self) -> int:
        return sum(self.values) + self.bonus


BreakdownEntry: TypeAlias = GroupEntry | AdvantageEntry | DisadvantageEntry | CriticalEntry


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RollResult:
    expression: DiceExpression
    roll_type: RollType
    breakdown: tuple[BreakdownEntry, ...]
    timestamp: datetime = field(default_factory=_now_utc)

    @property
    def modifier(self) -> int:
        return self.expression.modifier

    @property
    def total(self) -> int:
        return sum(entry.subtotal for entry in self.breakdown) + self.modifier

    @property
    def rolls(self) -> tuple[SingleDieRoll, ...]:
        return tuple(r for entry in self.breakdown for r in entry.rolls)
