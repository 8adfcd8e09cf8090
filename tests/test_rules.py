import pytest

from catchlottery.rules import DEFAULT_RULES, Family, LotteryRules, LotteryType


def test_default_rules_cover_every_scheduled_code():
    DEFAULT_RULES.validate()
    scheduled = set().union(*DEFAULT_RULES.schedule.values())
    assert scheduled <= set(DEFAULT_RULES.types)
    assert 6 not in DEFAULT_RULES.schedule  # no draws on Sunday


def test_sort_ranks_follow_publication_order():
    ranked = DEFAULT_RULES.ranked(DEFAULT_RULES.types)
    assert [t.code for t in ranked] == ["01", "07", "02", "08", "11", "03", "09", "05", "06"]


def test_families():
    assert DEFAULT_RULES.types["05"].family is Family.DIGITS
    assert DEFAULT_RULES.types["06"].family is Family.DIGITS
    assert DEFAULT_RULES.types["03"].family is Family.ORDERED
    assert {c for c, t in DEFAULT_RULES.types.items() if t.has_second_group} == {"01", "02"}


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_RULES.types["99"] = LotteryType("99", 99, "x", Family.DIGITS)
    with pytest.raises(TypeError):
        DEFAULT_RULES.schedule[6] = frozenset({"01"})


def test_unknown_code_in_schedule_rejected():
    with pytest.raises(ValueError, match="Unknown lottery codes"):
        LotteryRules.build([LotteryType("01", 1, "a", Family.ORDERED)], {0: ["01", "42"]})


def test_duplicate_rank_rejected():
    with pytest.raises(ValueError, match="Duplicate sort rank"):
        LotteryRules.build(
            [LotteryType("01", 1, "a", Family.ORDERED), LotteryType("02", 1, "b", Family.ORDERED)],
            {},
        )
