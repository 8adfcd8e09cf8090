"""Environment-based configuration."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import find_dotenv, load_dotenv

from .formatter import Delimiters

DEFAULT_URL = "https://www.taiwanlottery.com.tw/index_new.aspx"

_TRUE = {"1", "true", "yes", "on"}


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(x.strip() for x in raw.split(",") if x.strip())


@dataclass(frozen=True)
class Settings:
    source_url: str = DEFAULT_URL
    output_path: Path = Path("App_Data/lottery.txt")
    delimiter_info: str = "|"
    delimiter_number: str = ","
    check_version: bool = True

    send_mail: bool = False
    mail_to: Tuple[str, ...] = ()
    mail_subject: str = "Lottery results job failed"
    mail_sender: str = ""
    mail_sender_name: str = "CatchLottery"
    mail_retry_seconds: int = 60
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_account: str = ""
    smtp_password: str = ""
    smtp_starttls: bool = False

    write_log: bool = True
    log_dir: Path = Path("App_Data/Log")
    log_level: str = "INFO"
    fetch_timeout: float = 30.0

    @property
    def delimiters(self) -> Delimiters:
        return Delimiters(info=self.delimiter_info, number=self.delimiter_number)

    def validate(self) -> None:
        """Raise ValueError for settings the pipeline cannot run with."""
        Delimiters(info=self.delimiter_info, number=self.delimiter_number)
        if self.fetch_timeout <= 0:
            raise ValueError(f"FETCH_TIMEOUT must be positive, got {self.fetch_timeout}")
        if self.mail_retry_seconds < 0:
            raise ValueError(f"MAIL_SLEEP_TIME must not be negative, got {self.mail_retry_seconds}")

    def replace(self, **changes) -> "Settings":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the process environment (and `.env` when present)."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        d = cls()
        return cls(
            source_url=os.getenv("LOTTERY_CATCH_PATH") or d.source_url,
            output_path=Path(os.getenv("SAVE_FILE_PATH") or d.output_path),
            delimiter_info=os.getenv("DELIMITER_INFO") or d.delimiter_info,
            delimiter_number=os.getenv("DELIMITER_NUMBER") or d.delimiter_number,
            check_version=_flag("IS_CHECK_LASTVERSION", d.check_version),
            send_mail=_flag("IS_SEND_MAIL", d.send_mail),
            mail_to=_list("MAIL_SEND_TO"),
            mail_subject=os.getenv("MAIL_SUBJECT") or d.mail_subject,
            mail_sender=os.getenv("MAIL_SENDER") or d.mail_sender,
            mail_sender_name=os.getenv("MAIL_SENDER_NAME") or d.mail_sender_name,
            mail_retry_seconds=_int("MAIL_SLEEP_TIME", d.mail_retry_seconds),
            smtp_host=os.getenv("SMTP_HOST") or d.smtp_host,
            smtp_port=_int("SMTP_PORT", d.smtp_port),
            smtp_account=os.getenv("SMTP_ACCOUNT", d.smtp_account),
            smtp_password=os.getenv("SMTP_PASSWORD", d.smtp_password),
            smtp_starttls=_flag("SMTP_STARTTLS", d.smtp_starttls),
            write_log=_flag("IS_WRITE_LOG", d.write_log),
            log_dir=Path(os.getenv("LOG_FOLDER") or d.log_dir),
            log_level=(os.getenv("LOG_LEVEL") or d.log_level).upper(),
            fetch_timeout=_float("FETCH_TIMEOUT", d.fetch_timeout),
        )
