"""Failure kinds and stage results for the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


class StatusCode(IntEnum):
    SUCCESS = 0
    FETCH_FAILED = 1
    EXTRACT_FAILED = 2
    PERSIST_FAILED = 3
    USAGE_ERROR = 64  # bad arguments or configuration, nothing was run


class CatchLotteryError(Exception):
    """Base error for faults detected by the pipeline itself."""


class FetchError(CatchLotteryError):
    """The results page could not be retrieved."""


class ExtractError(CatchLotteryError):
    """The results page does not have the expected structure."""


class PersistError(CatchLotteryError):
    """The output file could not be written."""


class Stage(str, Enum):
    FETCH = "fetch"
    EXTRACT = "extract"
    PERSIST = "persist"

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def status(self) -> StatusCode:
        return _STATUS[self]


_TITLES = {
    Stage.FETCH: "Unable to fetch the latest draw results (step.1)",
    Stage.EXTRACT: "Unexpected error while parsing the latest draw results (step.2)",
    Stage.PERSIST: "Unexpected error while writing the draw results file (step.3)",
}

_STATUS = {
    Stage.FETCH: StatusCode.FETCH_FAILED,
    Stage.EXTRACT: StatusCode.EXTRACT_FAILED,
    Stage.PERSIST: StatusCode.PERSIST_FAILED,
}


@dataclass(frozen=True)
class StageOk:
    value: Any


@dataclass(frozen=True)
class StageFailure:
    stage: Stage
    error: BaseException
    elapsed: float

    @property
    def title(self) -> str:
        return self.stage.title

    @property
    def status(self) -> StatusCode:
        return self.stage.status
