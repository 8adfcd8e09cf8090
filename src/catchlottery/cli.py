from __future__ import annotations
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .config import Settings
from .errors import StatusCode
from .pipeline import run

BANNER = "--- Taiwan Lottery latest draw results ---\n"


class _Parser(argparse.ArgumentParser):
    """Usage errors exit with their own status, apart from the stage failures."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(int(StatusCode.USAGE_ERROR), f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="catch-lottery",
        description="Save today's Taiwan Lottery draw results as a delimited text file.",
        epilog="Exit status: 0 done or nothing to do, 1 fetch failed, 2 parse failed, "
               "3 write failed, 64 bad arguments or configuration.",
    )
    parser.add_argument("--url", help="Results page URL (overrides LOTTERY_CATCH_PATH)")
    parser.add_argument("--out", help="Output file path (overrides SAVE_FILE_PATH)")
    parser.add_argument("--no-check", action="store_true",
                        help="Always fetch, even if the output file is already current")
    parser.add_argument("--now", help="Pretend the run happens at this ISO timestamp (YYYY-MM-DDTHH:MM)")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while extracting")
    parser.add_argument("--log-level", help="Logging level (overrides LOG_LEVEL)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
        changes = {}
        if args.url:
            changes["source_url"] = args.url
        if args.out:
            changes["output_path"] = Path(args.out)
        if args.no_check:
            changes["check_version"] = False
        if args.log_level:
            changes["log_level"] = args.log_level.upper()
        settings = settings.replace(**changes)
        settings.validate()
    except ValueError as exc:
        parser.error(f"invalid configuration: {exc}")

    now = None
    if args.now:
        try:
            now = datetime.fromisoformat(args.now)
        except ValueError:
            parser.error(f"--now must be an ISO timestamp, got {args.now!r}")

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    print(BANNER)
    outcome = run(settings, now=now, progress=args.progress)
    if outcome.skipped:
        print(f"Nothing to do: {outcome.reason}")
    elif outcome.failure is None:
        print(f"Done. Saved {len(outcome.lines)} draw results to {outcome.output_path}")
    return int(outcome.status)


if __name__ == "__main__":
    raise SystemExit(main())
