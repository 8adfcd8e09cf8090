from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import FrozenSet

from .rules import LotteryRules

# results for the evening draws are announced within this hour range (inclusive)
ANNOUNCE_HOUR_BEGIN = 22
ANNOUNCE_HOUR_END = 23


@dataclass(frozen=True)
class ScheduleDecision:
    day: date
    weekday: int
    codes: FrozenSet[str]

    @property
    def scheduled(self) -> bool:
        return bool(self.codes)


def effective_date(now: datetime) -> date:
    """The draw day a run at `now` should collect.

    Outside the announcement window the page still shows the previous
    evening's results, so the previous calendar day is used.
    """
    if ANNOUNCE_HOUR_BEGIN <= now.hour <= ANNOUNCE_HOUR_END:
        return now.date()
    return now.date() - timedelta(days=1)


def resolve(now: datetime, rules: LotteryRules) -> ScheduleDecision:
    day = effective_date(now)
    weekday = day.weekday()
    return ScheduleDecision(day=day, weekday=weekday, codes=rules.scheduled_codes(weekday))
