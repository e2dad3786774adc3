import pytest

from mcp_dice_notation.dice import (
    is_expression,
    result_to_dict,
    roll,
    roll_from_text,
    scan,
    validate,
    validate_many,
)
from mcp_dice_notation.errors import DiceError, MalformedGroup, NoDiceGroupsFound
from mcp_dice_notation.models import DiceExpression, DieGroup


def test_validate_returns_expression_or_error():
    assert isinstance(validate("2d6+3"), DiceExpression)
    assert validate("2d") == MalformedGroup("2d")
    assert validate("+5") == NoDiceGroupsFound()


@pytest.mark.parametrize(
    ("text", "expected"),
    [("d20", True), ("2d6 + 1d4 - 1", True), ("+5", False), ("", False), ("1d1", False), ("hello", False)],
)
def test_is_expression(text, expected):
    assert is_expression(text) is expected


def test_scan_returns_substrings():
    assert scan("Attack: 1d20+5, Damage: 2d6+3") == ["1d20+5", "2d6+3"]


def test_roll_accepts_text_or_expression(fixed_random):
    from_text = roll("2d6+1", rng=fixed_random([2, 3]))
    from_expr = roll(validate("2d6+1"), rng=fixed_random([2, 3]))
    assert from_text.total == from_expr.total == 6
    assert from_text.expression.groups == (DieGroup(count=2, sides=6),)


def test_roll_invalid_text_raises():
    with pytest.raises(DiceError) as exc:
        roll("2d")
    assert exc.value.error == MalformedGroup("2d")


def test_roll_from_text_shape(fixed_random):
    out = roll_from_text("2D6+3", "advantage", rng=fixed_random([1, 6, 4, 2]))

    assert out["input"] == "2D6+3"
    assert out["normalized_expression"] == "2d6 + 3"
    assert out["roll_type"] == "advantage"
    assert out["total"] == 1 + 6 + 4 + 3
    assert out["terms"] == [
        {"type": "group", "label": "2d6", "rolls": [1, 6], "extremal": [True, True], "subtotal": 7, "count": 2, "sides": 6},
        {"type": "advantage", "label": "advantage", "rolls": [4, 2], "extremal": [False, False], "subtotal": 4, "kept": [4]},
    ]
    assert out["explanation"] == "2d6: rolls [1, 6] => 7; advantage: rolls [4, 2] -> add 4; +3 => 14"
    assert out["rng"]["source"] == "FixedRandom"
    assert out["timestamp"].endswith("Z")


def test_result_to_dict_disadvantage_and_critical(fixed_random):
    dis = result_to_dict(roll("d8", "disadvantage", rng=fixed_random([5, 3, 4])))
    assert dis["terms"][-1]["kept"] == [3]
    assert dis["terms"][-1]["subtotal"] == -3
    assert dis["total"] == 2

    crit = result_to_dict(roll("d8-1", "critical", rng=fixed_random([5, 3])))
    assert crit["terms"] == [
        {"type": "critical", "label": "critical", "rolls": [5, 3], "extremal": [False, False], "subtotal": 8, "count": 1, "sides": 8},
    ]
    assert crit["explanation"] == "critical 1d8: rolls [5, 3] => 8; -1 => 7"


def test_validate_many_keeps_order():
    results = validate_many(["d20", "2d", "+5"])
    assert isinstance(results[0], DiceExpression)
    assert results[1:] == [MalformedGroup("2d"), NoDiceGroupsFound()]
