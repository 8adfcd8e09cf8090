from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def write_output(path: str | Path, lines: Iterable[str]) -> Path:
    """Overwrite `path` with the formatted lines, in the given order."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with p.open("w", encoding=ENCODING, newline="\n") as f:
        for line in lines:
            f.write(line)
            count += 1
    logger.info("Wrote %d draw records to %s", count, p)
    return p
