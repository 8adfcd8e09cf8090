import pytest
import requests

from catchlottery.document import Document, fetch_document
from catchlottery.errors import FetchError


class FakeResponse:
    def __init__(self, content, status_code=200):
        self.content = content
        self.status_code = status_code
        self.encoding = "ISO-8859-1"

    @property
    def text(self):
        return self.content.decode(self.encoding)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_fetch_decodes_utf8():
    body = '<div id="right_full"><span>威力彩</span></div>'.encode("utf-8")
    session = FakeSession(FakeResponse(body))
    doc = fetch_document("https://example.test/", timeout=5, session=session)
    assert doc.select_one("#right_full span").text() == "威力彩"
    assert session.calls == [("https://example.test/", 5)]


def test_fetch_http_error():
    with pytest.raises(FetchError, match="503"):
        fetch_document("https://example.test/", session=FakeSession(FakeResponse(b"", 503)))


def test_fetch_connection_error():
    with pytest.raises(FetchError):
        fetch_document("https://example.test/", session=FakeSession(error=requests.ConnectionError("no route")))


def test_node_helpers():
    doc = Document.from_html(
        "<table id='t'><tr><td>a</td><td class='x y'>&nbsp;b&nbsp;</td></tr>"
        "<tr><td><table><tr><td>inner</td></tr></table></td></tr></table>"
    )
    table = doc.select_one("#t")
    rows = table.rows()
    assert len(rows) == 2
    cell = rows[0].cells()[1]
    assert cell.text() == "b"
    assert cell.attr("class") == "x y"
    assert cell.attr("missing", "-") == "-"


def test_strings_skip_comments():
    doc = Document.from_html("<div><span>01<!-- 99 --></span><span> </span><span>02</span></div>")
    assert doc.select_one("div").strings("span") == ["01", "02"]
