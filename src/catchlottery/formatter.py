from __future__ import annotations
from dataclasses import dataclass
from typing import List

from .rules import DrawRecord

LINE_BREAK = "\n"  # separates the info segment and each number group


@dataclass(frozen=True)
class Delimiters:
    info: str = "|"
    number: str = ","

    def __post_init__(self) -> None:
        if not self.info or not self.number:
            raise ValueError("Delimiters must not be empty")
        if self.info in self.number or self.number in self.info:
            raise ValueError("Info and number delimiters must not contain each other")
        if LINE_BREAK in self.info or LINE_BREAK in self.number:
            raise ValueError("Delimiters must not contain a line break")


def format_record(record: DrawRecord, delimiters: Delimiters) -> str:
    """Render a record as its output line.

    The info segment (name, date, period, rank) comes first, then one
    segment per number group. Every segment ends with a line break.
    """
    segments: List[str] = [
        delimiters.info.join([record.name, record.draw_date, record.period, str(record.sort_rank)])
    ]
    segments.extend(delimiters.number.join(group) for group in record.number_groups)
    return LINE_BREAK.join(segments) + LINE_BREAK


def parse_record(text: str, delimiters: Delimiters, type_code: str = "") -> DrawRecord:
    """Inverse of format_record."""
    segments = text.rstrip(LINE_BREAK).split(LINE_BREAK)
    info = segments[0].split(delimiters.info)
    if len(info) != 4:
        raise ValueError(f"Expected 4 info fields, got {len(info)}: {segments[0]!r}")
    name, draw_date, period, rank = info
    return DrawRecord(
        type_code=type_code,
        sort_rank=int(rank),
        name=name,
        draw_date=draw_date,
        period=period,
        number_groups=tuple(tuple(seg.split(delimiters.number)) for seg in segments[1:]),
    )
