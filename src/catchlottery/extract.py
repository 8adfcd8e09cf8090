"""Locate lottery sections on the results page and pull out their draws.

Each product on the page is introduced by an ``<a name="NN">`` anchor and
followed by a ``div`` wrapping a results table laid out as::

    row 0   label | game name
    row 1   label | <span>period</span>
    row 2   label | <span>date</span>
    row 3   label | sales figures (unused)
    row 4   label | winning numbers

Ball games publish the numbers as nested spans, draw order first and size
order second, with the supplementary zone after a ``<br>``. Digit games
publish a single span such as ``3 8 1``.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from tqdm import tqdm

from .document import Node
from .errors import ExtractError
from .rules import DrawRecord, Family, LotteryRules, LotteryType, NumberGroup

logger = logging.getLogger(__name__)

CONTENT_SELECTOR = "div#right_full"

NAME_ROW = 0
PERIOD_ROW = 1
DATE_ROW = 2
NUMBERS_ROW = 4
VALUE_CELL = 1  # td[2]


def content_region(doc: Node) -> Node:
    region = doc.select_one(CONTENT_SELECTOR)
    if region is None:
        raise ExtractError(f"Content region {CONTENT_SELECTOR!r} not found")
    return region


def locate_types(region: Node, rules: LotteryRules) -> List[LotteryType]:
    """Known lottery types anchored in `region`, ordered by sort rank."""
    codes = {anchor.attr("name") for anchor in region.select("a[name]")}
    return list(rules.ranked(codes))


def _results_rows(region: Node, code: str) -> List[Node]:
    anchor = region.select_one(f'a[name="{code}"]')
    if anchor is None:
        return []
    wrapper = anchor.next_sibling("div")
    if wrapper is None:
        return []
    table = wrapper.select_one("table")
    if table is None:
        return []
    return table.rows()


def _value_cell(rows: List[Node], index: int, code: str) -> Node:
    try:
        return rows[index].cells()[VALUE_CELL]
    except IndexError:
        raise ExtractError(f"Lottery {code}: results table has no value cell in row {index}") from None


def _first_span(cell: Node, code: str) -> Node:
    spans = cell.children("span")
    if not spans:
        raise ExtractError(f"Lottery {code}: expected a span in {cell!r}")
    return spans[0]


def _span_numbers(spans: Iterable[Node]) -> NumberGroup:
    numbers: List[str] = []
    for span in spans:
        numbers.extend(span.strings("span"))
    return tuple(numbers)


def ordered_numbers(cell: Node, second_group: bool = False) -> Tuple[NumberGroup, ...]:
    """Numbers of a ball game in the order they appear on the page."""
    before: List[Node] = []
    after: List[Node] = []
    target = before
    for child in cell.children():
        if child.name == "br" and target is before:
            target = after
        elif child.name == "span":
            target.append(child)

    groups = [_span_numbers(before)]
    if second_group:
        extra = _span_numbers(after)
        if extra:
            groups.append(extra)
    return tuple(groups)


def digit_numbers(span: Node) -> Tuple[NumberGroup, ...]:
    """Split a published digit string into one number per character."""
    digits = "".join(span.text().split())
    return (tuple(digits),)


def extract_record(region: Node, lottery: LotteryType) -> Optional[DrawRecord]:
    """Build the DrawRecord for `lottery`, or None when its table is absent."""
    rows = _results_rows(region, lottery.code)
    if not rows:
        logger.info("No results table for lottery %s (%s), skipping", lottery.code, lottery.name)
        return None

    code = lottery.code
    name = _value_cell(rows, NAME_ROW, code).text()
    period = _first_span(_value_cell(rows, PERIOD_ROW, code), code).text()
    draw_date = "".join(_first_span(_value_cell(rows, DATE_ROW, code), code).text().split())

    cell = _value_cell(rows, NUMBERS_ROW, code)
    if lottery.family is Family.ORDERED:
        groups = ordered_numbers(cell, second_group=lottery.has_second_group)
    else:
        groups = digit_numbers(_first_span(cell, code))

    if not groups[0]:
        raise ExtractError(f"Lottery {code}: no winning numbers found")

    return DrawRecord(
        type_code=code,
        sort_rank=lottery.sort_rank,
        name=name,
        draw_date=draw_date,
        period=period,
        number_groups=groups,
    )


def extract_records(region: Node, rules: LotteryRules, codes: Iterable[str],
                    progress: bool = False) -> List[DrawRecord]:
    """Records for every scheduled type present on the page, by sort rank."""
    wanted = set(codes)
    types = [t for t in locate_types(region, rules) if t.code in wanted]
    records: List[DrawRecord] = []
    for lottery in tqdm(types, desc="Extracting draws", unit="type", disable=not progress):
        record = extract_record(region, lottery)
        if record is not None:
            records.append(record)
    return records
