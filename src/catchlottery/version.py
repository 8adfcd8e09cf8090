from __future__ import annotations
import logging
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)

ROC_EPOCH_OFFSET = 1911  # Minguo year 1 == 1912


def roc_date(d: date) -> str:
    """Date as printed on the results page, e.g. 115年10月19日."""
    return f"{d.year - ROC_EPOCH_OFFSET}年{d.month}月{d.day}日"


def is_current(path: str | Path, expected: date, delimiter: str, enabled: bool = True) -> bool:
    """True when the saved output already holds the draws of `expected`.

    Only lines carrying the info delimiter are dated; their second field
    must equal the page's rendering of `expected`. A file without any
    dated line is treated as stale.
    """
    if not enabled:
        return False

    p = Path(path)
    if not p.is_file():
        return False

    wanted = roc_date(expected)
    dated = 0
    try:
        with p.open("r", encoding="utf-8") as f:
            for line in f:
                if delimiter not in line:
                    continue
                fields = [x for x in line.rstrip("\r\n").split(delimiter) if x]
                if len(fields) < 2 or fields[1] != wanted:
                    logger.info("Saved output %s is stale (found %r, want %s)", p, fields[1:2], wanted)
                    return False
                dated += 1
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read saved output %s, treating it as stale: %s", p, exc)
        return False

    if dated == 0:
        logger.info("Saved output %s has no dated lines", p)
        return False
    return True
