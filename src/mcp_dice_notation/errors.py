from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


_EXAMPLE = "Example: '2d6 + 3' or 'd20 - 1'."


@dataclass(frozen=True)
class ValidationError:
    """Base for parse-time failures. Returned as values, not raised."""

    code: ClassVar[str] = "INVALID_EXPRESSION"

    @property
    def message(self) -> str:
        return f"[{self.code}] Invalid dice expression. {_EXAMPLE}"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class EmptyInput(ValidationError):
    code: ClassVar[str] = "EMPTY_INPUT"

    @property
    def message(self) -> str:
        return f"[{self.code}] Empty input. {_EXAMPLE}"


@dataclass(frozen=True)
class MalformedGroup(ValidationError):
    text: str

    code: ClassVar[str] = "MALFORMED_GROUP"

    @property
    def message(self) -> str:
        return f"[{self.code}] Could not understand '{self.text}'. {_EXAMPLE}"


@dataclass(frozen=True)
class SidesOutOfRange(ValidationError):
    group: str
    sides: int
    maximum: int = 1000

    code: ClassVar[str] = "SIDES_OUT_OF_RANGE"

    @property
    def message(self) -> str:
        return (
            f"[{self.code}] Die '{self.group}' has {self.sides} sides; "
            f"dice must have between 2 and {self.maximum} sides."
        )


@dataclass(frozen=True)
class CountOutOfRange(ValidationError):
    group: str
    count: int
    maximum: int = 100

    code: ClassVar[str] = "COUNT_OUT_OF_RANGE"

    @property
    def message(self) -> str:
        return (
            f"[{self.code}] Group '{self.group}' rolls {self.count} dice; "
            f"the count must be between 1 and {self.maximum}."
        )


@dataclass(frozen=True)
class ModifierOutOfRange(ValidationError):
    value: int
    maximum: int = 9999

    code: ClassVar[str] = "MODIFIER_OUT_OF_RANGE"

    @property
    def message(self) -> str:
        return f"[{self.code}] Modifier {self.value:+d} is outside ±{self.maximum}."


@dataclass(frozen=True)
class NoDiceGroupsFound(ValidationError):
    code: ClassVar[str] = "NO_DICE_GROUPS"

    @property
    def message(self) -> str:
        return f"[{self.code}] At least one die group is required. Example: 'd20' or '2d6 + 3'."


class DiceError(ValueError):
    """User-facing validation errors (fail-fast, no roll performed)."""

    def __init__(self, error: ValidationError) -> None:
        super().__init__(error.message)
        self.error = error


class RngFailure(RuntimeError):
    """The randomness source failed while rolling. Not retried."""
