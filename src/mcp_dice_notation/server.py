from __future__ import annotations

import logging
from typing import Any, Literal

from mcp.server.fastmcp import FastMCP

from .config import settings
from .dice import result_to_dict, roll, scan, validate
from .evaluator import apply_roll_type
from .errors import ValidationError
from .hints import describe_error, suggest_fixes
from .history import RollHistory
from .parser import format_expression
from .stats import dice_average, dice_range, is_roll_type_eligible


logger = logging.getLogger(__name__)

mcp = FastMCP("mcp-dice-notation")
history = RollHistory(max_entries=settings.history_size)


def _reject(text: str, error: ValidationError) -> ValueError:
    hint = " ".join(suggest_fixes(text))
    return ValueError(f"{error.message} {hint}")


@mcp.tool()
def roll_dice(
    text: str,
    roll_type: Literal["normal", "advantage", "disadvantage", "critical"] = "normal",
    context: str | None = None,
) -> dict[str, Any]:
    """Roll dice notation such as '2d6+3' or 'd20-1'.

    Input: text (string), roll_type (normal/advantage/disadvantage/critical),
    optional context label stored with the roll history entry.
    Output: structured JSON with per-group breakdown, total and explanation.

    Raises a hard error (exception) on invalid input.
    """
    parsed = validate(text)
    if isinstance(parsed, ValidationError):
        raise _reject(text, parsed)

    if settings.enforce_roll_type_eligibility and not is_roll_type_eligible(parsed, roll_type):
        raise ValueError(
            f"[INELIGIBLE_ROLL_TYPE] '{roll_type}' cannot be applied when the base die is a d20. "
            "Example: '2d12+3' with advantage."
        )

    result = roll(parsed, roll_type)

    entry = history.add(result, context)
    out = result_to_dict(result)
    out["history_id"] = entry.id
    return out


@mcp.tool()
def reapply_roll_type(
    history_id: str,
    roll_type: Literal["normal", "advantage", "disadvantage", "critical"],
) -> dict[str, Any]:
    """Apply a roll type to an earlier roll, keeping its original dice.

    Critical cannot be combined with advantage or disadvantage; such requests,
    and re-applying the current roll type, leave the roll as it was
    ("applied": false).
    """
    entry = history.get(history_id)
    if entry is None:
        raise ValueError(f"[UNKNOWN_ROLL] No roll with id '{history_id}' in history.")

    expr = entry.result.expression
    if settings.enforce_roll_type_eligibility and not is_roll_type_eligible(expr, roll_type):
        raise ValueError(
            f"[INELIGIBLE_ROLL_TYPE] '{roll_type}' cannot be applied when the base die is a d20."
        )

    result = apply_roll_type(entry.result, roll_type, critical_policy=settings.critical_policy)
    if result is entry.result:
        return {"applied": False, "history_id": entry.id, **result_to_dict(result)}

    new_entry = history.add(result, entry.context)
    return {"applied": True, "history_id": new_entry.id, **result_to_dict(result)}


@mcp.tool()
def validate_dice(text: str) -> dict[str, Any]:
    """Check dice notation without rolling. Returns the parsed groups or the error."""
    parsed = validate(text)
    if isinstance(parsed, ValidationError):
        return {
            "valid": False,
            "code": parsed.code,
            "message": describe_error(parsed),
            "suggestions": suggest_fixes(text),
        }

    low, high = dice_range(parsed)
    return {
        "valid": True,
        "normalized_expression": format_expression(parsed),
        "groups": [{"count": g.count, "sides": g.sides} for g in parsed.groups],
        "modifier": parsed.modifier,
        "min": low,
        "max": high,
        "average": dice_average(parsed),
    }


@mcp.tool()
def scan_dice(text: str) -> list[str]:
    """Find dice notation embedded in free text, e.g. 'Attack: 1d20+5, Damage: 2d6+3'."""
    return scan(text)


@mcp.tool()
def roll_history(limit: int = 10) -> list[dict[str, Any]]:
    """Most recent rolls first."""
    return [
        {"id": e.id, "context": e.context, **result_to_dict(e.result)}
        for e in history.entries(limit)
    ]


@mcp.tool()
def clear_roll_history() -> str:
    history.clear()
    return "Roll history cleared."


def run() -> None:
    # stdio carries the protocol, so logs go to stderr.
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting mcp-dice-notation (critical policy: %s)", settings.critical_policy)
    # Default transport is stdio, which works well for MCP client integration.
    mcp.run()


if __name__ == "__main__":
    run()
