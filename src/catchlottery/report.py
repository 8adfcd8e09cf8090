"""Failure notification: email, log artifact and console."""

from __future__ import annotations

import logging
import smtplib
import sys
import time
import traceback
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path
from string import Template
from typing import Callable, Optional

from .config import Settings
from .errors import StageFailure

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "failure_mail.html"
START_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_NAME_FORMAT = "%Y%m%d%H%M%S"
SMTP_TIMEOUT_SEC = 30
MAIL_ATTEMPTS = 2

CONSOLE_MESSAGE = "Run failed!\nReason: {title}\nMessage: {message}\n"


@dataclass(frozen=True)
class FailureReport:
    title: str
    error: BaseException
    started_at: datetime
    elapsed_seconds: int

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__

    @property
    def location(self) -> str:
        """file:line:column of the innermost frame that raised the error."""
        frames = traceback.extract_tb(self.error.__traceback__)
        if not frames:
            return "unknown"
        last = frames[-1]
        col = getattr(last, "colno", None)
        return f"{last.filename}:{last.lineno}:{'' if col is None else col}"


def load_template() -> str:
    return TEMPLATE_PATH.read_text(encoding="utf-8")


def render_mail(report: FailureReport, template: Optional[str] = None) -> str:
    tpl = Template(template if template is not None else load_template())
    return tpl.substitute(
        start=report.started_at.strftime(START_FORMAT),
        title=report.title,
        seconds=report.elapsed_seconds,
        year=datetime.now().year,
    )


def render_log(report: FailureReport) -> str:
    return "\n".join([
        f"Title: {report.title}",
        f"Message: {report.message}",
        f"Elapsed: {report.elapsed_seconds} s",
        f"Location: {report.location}",
    ])


class MailNotifier:
    """Sends the rendered failure mail through SMTP, retrying once."""

    def __init__(self, settings: Settings, sleep: Callable[[float], None] = time.sleep):
        self.settings = settings
        self._sleep = sleep

    def _build(self, html: str) -> EmailMessage:
        s = self.settings
        msg = EmailMessage()
        msg["Subject"] = s.mail_subject
        msg["From"] = formataddr((s.mail_sender_name, s.mail_sender))
        msg["To"] = ", ".join(s.mail_to)
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        s = self.settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=SMTP_TIMEOUT_SEC) as smtp:
            if s.smtp_starttls:
                smtp.starttls()
            if s.smtp_account:
                smtp.login(s.smtp_account, s.smtp_password)
            smtp.send_message(msg)

    def send(self, html: str) -> bool:
        if not self.settings.mail_to:
            logger.warning("Mail enabled but MAIL_SEND_TO is empty, not sending")
            return False

        msg = self._build(html)
        for attempt in range(1, MAIL_ATTEMPTS + 1):
            try:
                self._deliver(msg)
                logger.info("Failure mail sent to %s", ", ".join(self.settings.mail_to))
                return True
            except (smtplib.SMTPException, OSError) as exc:
                logger.warning("Sending failure mail failed (attempt %d/%d): %s",
                               attempt, MAIL_ATTEMPTS, exc)
                if attempt < MAIL_ATTEMPTS:
                    self._sleep(self.settings.mail_retry_seconds)
        logger.error("Giving up on failure mail after %d attempts", MAIL_ATTEMPTS)
        return False


class LogFileSink:
    """Writes one text file per failure, named by timestamp."""

    def __init__(self, directory: str | Path, clock: Callable[[], datetime] = datetime.now):
        self.directory = Path(directory)
        self._clock = clock

    def record(self, report: FailureReport) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{self._clock().strftime(LOG_NAME_FORMAT)}.txt"
        path.write_text(render_log(report), encoding="utf-8")
        logger.info("Failure log written to %s", path)
        return path


class FailureReporter:
    def __init__(self, notifier: Optional[MailNotifier], recorder: Optional[LogFileSink],
                 send_mail: bool = False, write_log: bool = False, stream=None):
        self.notifier = notifier
        self.recorder = recorder
        self.send_mail = send_mail
        self.write_log = write_log
        self.stream = stream

    @classmethod
    def from_settings(cls, settings: Settings) -> "FailureReporter":
        return cls(
            notifier=MailNotifier(settings),
            recorder=LogFileSink(settings.log_dir),
            send_mail=settings.send_mail,
            write_log=settings.write_log,
        )

    def report(self, failure: StageFailure, started_at: datetime) -> FailureReport:
        report = FailureReport(
            title=failure.title,
            error=failure.error,
            started_at=started_at,
            elapsed_seconds=round(failure.elapsed),
        )
        logger.error("%s: %s", report.title, report.message, exc_info=failure.error)

        if self.send_mail and self.notifier is not None:
            self.notifier.send(render_mail(report))
        if self.write_log and self.recorder is not None:
            try:
                self.recorder.record(report)
            except OSError:
                logger.exception("Could not write failure log to %s", self.recorder.directory)

        out = self.stream or sys.stderr
        out.write(CONSOLE_MESSAGE.format(title=report.title, message=report.message))
        return report
