import pytest

from mcp_dice_notation.errors import (
    CountOutOfRange,
    DiceError,
    EmptyInput,
    MalformedGroup,
    ModifierOutOfRange,
    NoDiceGroupsFound,
    SidesOutOfRange,
)
from mcp_dice_notation.models import DiceLimits
from mcp_dice_notation.parser import parse, parse_expression


@pytest.mark.parametrize(
    ("text", "error"),
    [
        ("", EmptyInput()),
        ("   \t", EmptyInput()),
        ("2d", MalformedGroup("2d")),
        ("d", MalformedGroup("d")),
        ("2d6x", MalformedGroup("2d6x")),
        ("roll some dice", MalformedGroup("roll")),
        ("(2d6 + 3) * 2", MalformedGroup("(")),
        ("2d6++3", MalformedGroup("++")),
        ("2d6 + - 3", MalformedGroup("+ -")),
        ("2d6+", MalformedGroup("+")),
        ("2d6 3", MalformedGroup("3")),
        ("1d20 - 1d4", MalformedGroup("- 1d4")),
        ("-d6", MalformedGroup("-d6")),
        ("1d1", SidesOutOfRange(group="1d1", sides=1, maximum=1000)),
        ("2d0", SidesOutOfRange(group="2d0", sides=0, maximum=1000)),
        ("2d1001", SidesOutOfRange(group="2d1001", sides=1001, maximum=1000)),
        ("0d6", CountOutOfRange(group="0d6", count=0, maximum=100)),
        ("101d6", CountOutOfRange(group="101d6", count=101, maximum=100)),
        ("2d6+100000", ModifierOutOfRange(value=100000, maximum=9999)),
        ("2d6-10000", ModifierOutOfRange(value=-10000, maximum=9999)),
        ("+5", NoDiceGroupsFound()),
        ("42", NoDiceGroupsFound()),
    ],
)
def test_parse_rejections(text, error):
    assert parse(text) == error


def test_first_error_left_to_right_wins():
    assert parse("101d6 + 1d1") == CountOutOfRange(group="101d6", count=101, maximum=100)


def test_custom_limits():
    limits = DiceLimits(max_count=4, max_sides=12, max_modifier=10)
    assert parse("5d6", limits) == CountOutOfRange(group="5d6", count=5, maximum=4)
    assert parse("d20", limits) == SidesOutOfRange(group="d20", sides=20, maximum=12)
    assert parse("d6+11", limits) == ModifierOutOfRange(value=11, maximum=10)


def test_huge_numbers_are_out_of_range_not_crashes():
    error = parse("1d" + "9" * 5000)
    assert isinstance(error, SidesOutOfRange)


@pytest.mark.parametrize(
    ("text", "prefix"),
    [
        ("", "[EMPTY_INPUT]"),
        ("2d", "[MALFORMED_GROUP]"),
        ("1d1", "[SIDES_OUT_OF_RANGE]"),
        ("101d6", "[COUNT_OUT_OF_RANGE]"),
        ("d6+100000", "[MODIFIER_OUT_OF_RANGE]"),
        ("+5", "[NO_DICE_GROUPS]"),
    ],
)
def test_parse_expression_raises_with_code(text, prefix):
    with pytest.raises(DiceError) as exc:
        parse_expression(text)
    assert str(exc.value).startswith(prefix)
    assert exc.value.error.code in prefix


@pytest.mark.parametrize("text", ["2d6 3", "2d6 3d4", "1 d6 2 d4"])
def test_groups_need_an_operator_between_them(text):
    assert isinstance(parse(text), MalformedGroup)
