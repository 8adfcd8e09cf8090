#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path

# ----- Ensure local package import (src/catchlottery) without editable install -----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC = PROJECT_ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from catchlottery.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
