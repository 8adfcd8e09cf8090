import io
from datetime import datetime

import requests

from catchlottery.document import Document
from catchlottery.errors import FetchError, Stage, StatusCode
from catchlottery.pipeline import run
from catchlottery.report import FailureReporter, LogFileSink

MONDAY_NIGHT = datetime(2026, 10, 19, 22, 30)
TUESDAY_MORNING = datetime(2026, 10, 20, 7, 0)

EXPECTED = (
    "威力彩|115年10月19日|115000084|1\n"
    "17,05,33,02,28,11,02,05,11,17,28,33\n"
    "06\n"
    "38樂合彩|115年10月19日|115000084|2\n"
    "17,05,33,02,28,11,02,05,11,17,28,33\n"
    "3星彩|115年10月19日|115000250|8\n"
    "3,8,1\n"
)


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def send(self, html):
        self.messages.append(html)
        return True


class CountingFetch:
    def __init__(self, html=None, error=None):
        self.html = html
        self.error = error
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return Document.from_html(self.html)


def _reporter(settings, notifier=None):
    return FailureReporter(notifier or RecordingNotifier(), LogFileSink(settings.log_dir),
                           send_mail=settings.send_mail, write_log=settings.write_log,
                           stream=io.StringIO())


def test_monday_run_writes_ranked_records(settings, page_html):
    fetch = CountingFetch(page_html)
    outcome = run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    assert outcome.status is StatusCode.SUCCESS
    assert not outcome.skipped
    assert fetch.urls == ["https://example.test/results"]
    assert settings.output_path.read_text(encoding="utf-8") == EXPECTED
    assert len(outcome.lines) == 3


def test_morning_run_collects_previous_evening(settings, page_html):
    outcome = run(settings, now=TUESDAY_MORNING, fetch=CountingFetch(page_html),
                  reporter=_reporter(settings))
    assert outcome.status is StatusCode.SUCCESS
    assert settings.output_path.read_text(encoding="utf-8") == EXPECTED


def test_two_types_in_rank_order(settings):
    html = (
        '<div id="right_full">'
        '<a name="07"></a><div><table>'
        "<tr><td>a</td><td>38樂合彩</td></tr><tr><td>b</td><td><span>115000084</span></td></tr>"
        "<tr><td>c</td><td><span>115年10月19日</span></td></tr><tr><td>d</td><td></td></tr>"
        "<tr><td>e</td><td><span><span>01</span><span>02</span></span></td></tr>"
        "</table></div>"
        '<a name="01"></a><div><table>'
        "<tr><td>a</td><td>威力彩</td></tr><tr><td>b</td><td><span>115000084</span></td></tr>"
        "<tr><td>c</td><td><span>115年10月19日</span></td></tr><tr><td>d</td><td></td></tr>"
        "<tr><td>e</td><td><span><span>03</span><span>04</span></span><br><span>05</span></td></tr>"
        "</table></div></div>"
    )
    outcome = run(settings, now=MONDAY_NIGHT, fetch=CountingFetch(html), reporter=_reporter(settings))
    assert outcome.lines == (
        "威力彩|115年10月19日|115000084|1\n03,04\n05\n",
        "38樂合彩|115年10月19日|115000084|2\n01,02\n",
    )
    info = [l for l in settings.output_path.read_text(encoding="utf-8").splitlines() if "|" in l]
    assert [l.split("|")[0] for l in info] == ["威力彩", "38樂合彩"]


def test_missing_table_is_not_a_failure(settings, page_html):
    notifier = RecordingNotifier()
    outcome = run(settings, now=MONDAY_NIGHT, fetch=CountingFetch(page_html),
                  reporter=_reporter(settings, notifier))
    # 03 is scheduled and anchored but has no table
    assert outcome.status is StatusCode.SUCCESS
    assert outcome.failure is None
    assert "今彩539" not in settings.output_path.read_text(encoding="utf-8")
    assert notifier.messages == []
    assert not settings.log_dir.exists()


def test_unscheduled_day_does_nothing(settings):
    fetch = CountingFetch(error=AssertionError("must not fetch"))
    outcome = run(settings, now=datetime(2026, 10, 18, 22, 0), fetch=fetch, reporter=_reporter(settings))
    assert outcome.status is StatusCode.SUCCESS
    assert outcome.skipped
    assert fetch.urls == []
    assert not settings.output_path.exists()


def test_second_run_is_skipped_when_current(settings, page_html):
    fetch = CountingFetch(page_html)
    run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    outcome = run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    assert outcome.skipped
    assert len(fetch.urls) == 1


def test_second_run_without_check_is_byte_identical(settings, page_html):
    settings = settings.replace(check_version=False)
    fetch = CountingFetch(page_html)
    run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    first = settings.output_path.read_bytes()
    outcome = run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    assert not outcome.skipped
    assert len(fetch.urls) == 2
    assert settings.output_path.read_bytes() == first


def test_stale_output_is_refreshed(settings, page_html):
    settings.output_path.parent.mkdir(parents=True)
    settings.output_path.write_text("威力彩|115年10月16日|115000083|1\n01\n", encoding="utf-8")
    outcome = run(settings, now=MONDAY_NIGHT, fetch=CountingFetch(page_html), reporter=_reporter(settings))
    assert not outcome.skipped
    assert settings.output_path.read_text(encoding="utf-8") == EXPECTED


def test_undecodable_output_is_refreshed(settings, page_html):
    settings.output_path.parent.mkdir(parents=True)
    settings.output_path.write_bytes(b"\xff\xfe\xfa|115\n")
    outcome = run(settings, now=MONDAY_NIGHT, fetch=CountingFetch(page_html), reporter=_reporter(settings))
    assert outcome.status is StatusCode.SUCCESS
    assert settings.output_path.read_text(encoding="utf-8") == EXPECTED


def test_fetch_failure(settings):
    notifier = RecordingNotifier()
    fetch = CountingFetch(error=FetchError("Request for https://example.test/results failed"))
    outcome = run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings, notifier))
    assert outcome.status is StatusCode.FETCH_FAILED
    assert int(outcome.status) == 1
    assert outcome.failure.stage is Stage.FETCH
    assert len(notifier.messages) == 1
    assert Stage.FETCH.title in notifier.messages[0]
    assert len(list(settings.log_dir.iterdir())) == 1
    assert not settings.output_path.exists()


def test_unexpected_fetch_error_maps_to_fetch_stage(settings):
    fetch = CountingFetch(error=requests.ConnectionError("reset"))
    outcome = run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    assert outcome.status is StatusCode.FETCH_FAILED


def test_extract_failure(settings):
    fetch = CountingFetch("<html><body><p>maintenance</p></body></html>")
    outcome = run(settings, now=MONDAY_NIGHT, fetch=fetch, reporter=_reporter(settings))
    assert outcome.status is StatusCode.EXTRACT_FAILED
    assert outcome.failure.stage is Stage.EXTRACT
    assert not settings.output_path.exists()


def test_persist_failure(settings, page_html, tmp_path):
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    settings = settings.replace(output_path=blocked)
    outcome = run(settings, now=MONDAY_NIGHT, fetch=CountingFetch(page_html), reporter=_reporter(settings))
    assert outcome.status is StatusCode.PERSIST_FAILED
    assert int(outcome.status) == 3
