"""One run of the draw results job.

Idle -> schedule checked -> skipped, or
fetch -> extract -> persist -> done, where any of the three stages may end
the run as a StageFailure carrying its own exit status.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Tuple

from .config import Settings
from .document import Document, fetch_document
from .errors import Stage, StageFailure, StageOk, StatusCode
from .extract import content_region, extract_records
from .formatter import Delimiters, format_record
from .report import FailureReporter
from .rules import DEFAULT_RULES, LotteryRules
from .schedule import resolve
from .version import is_current
from .writer import write_output

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Document]


@dataclass(frozen=True)
class RunOutcome:
    status: StatusCode
    skipped: bool = False
    reason: str = ""
    lines: Tuple[str, ...] = ()
    output_path: Optional[Path] = None
    failure: Optional[StageFailure] = None


def _run_stage(stage: Stage, t0: float, clock: Callable[[], float], fn, *args, **kwargs):
    try:
        return StageOk(fn(*args, **kwargs))
    except Exception as exc:
        return StageFailure(stage=stage, error=exc, elapsed=clock() - t0)


def build_lines(doc: Document, rules: LotteryRules, codes: FrozenSet[str],
                delimiters: Delimiters, progress: bool = False) -> List[str]:
    region = content_region(doc)
    records = extract_records(region, rules, codes, progress=progress)
    if not records:
        logger.warning("None of the scheduled lotteries %s were found on the page", sorted(codes))
    return [format_record(r, delimiters) for r in records]


def run(
    settings: Settings,
    *,
    now: Optional[datetime] = None,
    rules: LotteryRules = DEFAULT_RULES,
    fetch: Optional[Fetcher] = None,
    reporter: Optional[FailureReporter] = None,
    progress: bool = False,
    clock: Callable[[], float] = time.monotonic,
) -> RunOutcome:
    decision = resolve(now or datetime.now(), rules)
    if not decision.scheduled:
        reason = f"No draws scheduled on {decision.day:%A} {decision.day.isoformat()}"
        logger.info(reason)
        return RunOutcome(StatusCode.SUCCESS, skipped=True, reason=reason)

    delimiters = settings.delimiters
    if is_current(settings.output_path, decision.day, delimiters.info, enabled=settings.check_version):
        reason = f"{settings.output_path} already holds the draws of {decision.day.isoformat()}"
        logger.info(reason)
        return RunOutcome(StatusCode.SUCCESS, skipped=True, reason=reason)

    fetch = fetch or partial(fetch_document, timeout=settings.fetch_timeout)
    reporter = reporter or FailureReporter.from_settings(settings)
    started_at = datetime.now()
    t0 = clock()

    def fail(result: StageFailure) -> RunOutcome:
        reporter.report(result, started_at)
        return RunOutcome(result.status, failure=result)

    logger.info("Fetching %s for draws of %s", settings.source_url, decision.day.isoformat())
    fetched = _run_stage(Stage.FETCH, t0, clock, fetch, settings.source_url)
    if isinstance(fetched, StageFailure):
        return fail(fetched)
    logger.info("Fetched results page in %d s", round(clock() - t0))

    built = _run_stage(Stage.EXTRACT, t0, clock, build_lines,
                       fetched.value, rules, decision.codes, delimiters, progress)
    if isinstance(built, StageFailure):
        return fail(built)
    lines = tuple(built.value)

    written = _run_stage(Stage.PERSIST, t0, clock, write_output, settings.output_path, lines)
    if isinstance(written, StageFailure):
        return fail(written)

    return RunOutcome(StatusCode.SUCCESS, lines=lines, output_path=written.value)
