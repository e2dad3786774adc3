from __future__ import annotations

import re
from dataclasses import dataclass, field

from .errors import (
    CountOutOfRange,
    EmptyInput,
    MalformedGroup,
    ModifierOutOfRange,
    NoDiceGroupsFound,
    SidesOutOfRange,
    ValidationError,
)
from .grammar import to_int


def describe_error(error: ValidationError) -> str:
    """Friendly one-line message for showing next to an input field."""
    if isinstance(error, EmptyInput):
        return 'Please enter a dice expression (e.g. "2d6+3" or "d20").'
    if isinstance(error, NoDiceGroupsFound):
        return 'Add at least one die, e.g. "d20+5" instead of "+5".'
    if isinstance(error, MalformedGroup):
        return f'"{error.text}" is not dice notation. Try formats like "2d6+3" or "d20-1".'
    if isinstance(error, CountOutOfRange):
        if error.count < 1:
            return f"Invalid number of dice in {error.group}: roll at least 1."
        return f"Too many dice in {error.group}. Maximum allowed is {error.maximum}."
    if isinstance(error, SidesOutOfRange):
        if error.sides < 2:
            return f"Invalid die {error.group}: dice must have at least 2 sides."
        return f"Die too large ({error.group}). Maximum allowed is d{error.maximum}."
    if isinstance(error, ModifierOutOfRange):
        return f"Modifier too large ({error.value:+d}). Maximum allowed is ±{error.maximum}."
    return error.message


def suggest_fixes(text: str) -> list[str]:
    """Suggestions for common notation mistakes."""
    suggestions: list[str] = []
    cleaned = re.sub(r"\s+", "", text or "").lower()

    if "dice" in cleaned or "die" in cleaned:
        suggestions.append('Use "d" notation instead of words (e.g. "2d6" instead of "2 dice").')

    if re.search(r"\d[x*×]\d", cleaned):
        suggestions.append('Use "d" for dice notation (e.g. "2d6" instead of "2x6").')

    if re.fullmatch(r"\d+-\d+", cleaned):
        suggestions.append('Did you mean a die range? Use "d" notation (e.g. "1d6" instead of "1-6").')

    if "." in cleaned or "," in cleaned:
        suggestions.append("Use whole numbers only, without decimal points or commas.")

    if "++" in cleaned or "--" in cleaned or "+-" in cleaned or "-+" in cleaned:
        suggestions.append('Use a single + or - between terms (e.g. "2d6+3" instead of "2d6++3").')

    if re.fullmatch(r"[0-9]{1,3}", cleaned) and 1 < int(cleaned) <= 100:
        suggestions.append(f'Did you mean "d{cleaned}" (one {cleaned}-sided die)?')

    if not suggestions:
        suggestions.append('Try formats like "2d6+3" (dice plus modifier) or "d20" (single die).')

    return suggestions


def sanitize_input(text: str) -> str:
    """Best-effort cleanup of typed notation, e.g. ``" 2 x 6 ++ 3 "`` -> ``"2d6+3"``.

    The output is not guaranteed to be valid; run it through the parser.
    """
    s = re.sub(r"\s+", "", text or "")
    s = re.sub(r"[xX×]", "d", s)
    s = re.sub(r"D(?=[0-9])", "d", s)
    s = re.sub(r"[^0-9+\-d]", "", s)

    # Collapse operator runs: repeated signs keep the sign, mixed signs subtract.
    s = re.sub(r"[+-]{2,}", lambda m: "-" if "-" in m.group(0) else "+", s)
    return s.strip("+-")


@dataclass(frozen=True)
class SafetyReport:
    warnings: list[str] = field(default_factory=list)

    @property
    def is_safe(self) -> bool:
        return not self.warnings


def check_expression_safety(text: str) -> SafetyReport:
    """Warnings for input that is legal but expensive or suspicious."""
    warnings: list[str] = []

    large = re.findall(r"[0-9]{4,}", text)
    if large:
        warnings.append(f"Very large numbers detected: {', '.join(large)}")

    for count in re.findall(r"([0-9]+)\s*[dD]", text):
        if to_int(count) > 50:
            warnings.append(f"High dice count: {to_int(count)}d (this may be slow to calculate)")

    complexity = len(re.findall(r"[dD]", text)) + len(re.findall(r"[+-]", text))
    if complexity > 10:
        warnings.append("Very complex expression (may be slow to process)")

    return SafetyReport(warnings=warnings)
