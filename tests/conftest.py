from pathlib import Path

import pytest

from catchlottery.config import Settings
from catchlottery.document import Document

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def page_html() -> str:
    return (FIXTURES / "draw_page.html").read_text(encoding="utf-8")


@pytest.fixture
def page(page_html) -> Document:
    return Document.from_html(page_html)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        source_url="https://example.test/results",
        output_path=tmp_path / "out" / "lottery.txt",
        log_dir=tmp_path / "log",
        write_log=True,
        send_mail=True,
        mail_to=("ops@example.com",),
        mail_sender="noreply@example.com",
    )
