import pytest

from mcp_dice_notation.parser import parse_expression
from mcp_dice_notation.stats import dice_average, dice_range, is_roll_type_eligible


@pytest.mark.parametrize(
    ("text", "low", "high", "average"),
    [
        ("d20", 1, 20, 10.5),
        ("2d6+3", 5, 15, 10.0),
        ("3d8 + d4 - 2", 2, 26, 14.0),
    ],
)
def test_range_and_average(text, low, high, average):
    expr = parse_expression(text)
    assert dice_range(expr) == (low, high)
    assert dice_average(expr) == average


@pytest.mark.parametrize(
    ("text", "roll_type", "eligible"),
    [
        ("d20+5", "normal", True),
        ("d20+5", "advantage", False),
        ("d20+5", "critical", False),
        ("2d12+1", "advantage", True),
        ("2d12+1", "disadvantage", True),
        ("d8 + d20", "critical", True),
    ],
)
def test_roll_type_eligibility(text, roll_type, eligible):
    assert is_roll_type_eligible(parse_expression(text), roll_type) is eligible
