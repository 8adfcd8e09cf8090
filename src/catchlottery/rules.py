from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple

NumberGroup = Tuple[str, ...]          # numbers exactly as published, in page order
NumberGroups = Tuple[NumberGroup, ...]  # main group, optional supplementary group


class Family(str, Enum):
    ORDERED = "ordered"  # ball draws, size order and draw order both published
    DIGITS = "digits"    # fixed-width digit string, one character per number


@dataclass(frozen=True)
class LotteryType:
    code: str
    sort_rank: int
    name: str
    family: Family
    has_second_group: bool = False


@dataclass(frozen=True)
class DrawRecord:
    type_code: str
    sort_rank: int
    name: str
    draw_date: str
    period: str
    number_groups: NumberGroups


@dataclass(frozen=True)
class LotteryRules:
    """Reference tables for the products found on the results page.

    `types` maps the anchor code to its LotteryType, `schedule` maps a
    weekday (Monday == 0) to the codes drawn that day.
    """
    types: Mapping[str, LotteryType] = field(default_factory=dict)
    schedule: Mapping[int, FrozenSet[str]] = field(default_factory=dict)

    @classmethod
    def build(cls, types: Iterable[LotteryType], schedule: Dict[int, Iterable[str]]) -> "LotteryRules":
        rules = cls(
            types=MappingProxyType({t.code: t for t in types}),
            schedule=MappingProxyType({day: frozenset(codes) for day, codes in schedule.items()}),
        )
        rules.validate()
        return rules

    def validate(self) -> None:
        """Check that the schedule only names known codes and ranks are unique."""
        ranks = [t.sort_rank for t in self.types.values()]
        if len(set(ranks)) != len(ranks):
            raise ValueError("Duplicate sort rank in lottery types")
        for day, codes in self.schedule.items():
            if not 0 <= day <= 6:
                raise ValueError(f"Weekday out of range (0-6): {day}")
            unknown = sorted(codes - set(self.types))
            if unknown:
                raise ValueError(f"Unknown lottery codes scheduled on day {day}: {unknown}")

    def scheduled_codes(self, weekday: int) -> FrozenSet[str]:
        return self.schedule.get(weekday, frozenset())

    def ranked(self, codes: Iterable[str]) -> Tuple[LotteryType, ...]:
        return tuple(sorted((self.types[c] for c in codes if c in self.types), key=lambda t: t.sort_rank))


_MON_THU = ("01", "07", "03", "09", "05", "06")
_TUE_FRI = ("02", "08", "03", "09", "05", "06")
_WED_SAT = ("11", "03", "09", "05", "06")

# ranks follow the publication order of the official draw schedule
DEFAULT_RULES = LotteryRules.build(
    types=[
        LotteryType("01", 1, "威力彩", Family.ORDERED, has_second_group=True),
        LotteryType("07", 2, "38樂合彩", Family.ORDERED),
        LotteryType("02", 3, "大樂透", Family.ORDERED, has_second_group=True),
        LotteryType("08", 4, "49樂合彩", Family.ORDERED),
        LotteryType("11", 5, "大福彩", Family.ORDERED),
        LotteryType("03", 6, "今彩539", Family.ORDERED),
        LotteryType("09", 7, "39樂合彩", Family.ORDERED),
        LotteryType("05", 8, "3星彩", Family.DIGITS),
        LotteryType("06", 9, "4星彩", Family.DIGITS),
    ],
    schedule={
        0: _MON_THU,
        1: _TUE_FRI,
        2: _WED_SAT,
        3: _MON_THU,
        4: _TUE_FRI,
        5: _WED_SAT,
    },
)
