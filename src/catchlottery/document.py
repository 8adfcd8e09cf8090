from __future__ import annotations
from typing import Iterator, List, Optional

import requests
from bs4 import BeautifulSoup, Comment, Tag

from .errors import FetchError

TIMEOUT_SEC = 30
USER_AGENT = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
              "(KHTML, like Gecko) Chrome/125.0 Safari/537.36")

NBSP = "\xa0"


def _clean(s: str) -> str:
    return s.replace(NBSP, "").strip()


class Node:
    """Read-only view of one element in a parsed page.

    Extraction code only talks to this class, so it never depends on the
    parser's own API.
    """

    def __init__(self, tag: Tag):
        self._tag = tag

    def __repr__(self) -> str:
        return f"<Node {self.name}>"

    @property
    def name(self) -> str:
        return self._tag.name

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._tag.get(name, default)
        if isinstance(value, list):  # multi-valued attributes such as class
            return " ".join(value)
        return value

    def select(self, selector: str) -> List["Node"]:
        return [Node(t) for t in self._tag.select(selector)]

    def select_one(self, selector: str) -> Optional["Node"]:
        found = self._tag.select_one(selector)
        return Node(found) if found is not None else None

    def next_sibling(self, name: str) -> Optional["Node"]:
        found = self._tag.find_next_sibling(name)
        return Node(found) if found is not None else None

    def children(self, name: Optional[str] = None) -> List["Node"]:
        """Direct element children, optionally only those named `name`."""
        return [Node(c) for c in self._tag.children
                if isinstance(c, Tag) and (name is None or c.name == name)]

    def rows(self) -> List["Node"]:
        """Rows belonging to this table, skipping rows of nested tables."""
        return [Node(tr) for tr in self._tag.find_all("tr")
                if tr.find_parent("table") is self._tag]

    def cells(self) -> List["Node"]:
        return self.children("td")

    def text(self) -> str:
        return _clean(self._tag.get_text())

    def strings(self, owner: str) -> List[str]:
        """Non-empty text nodes whose parent element is `owner`, in document order."""
        return [value for value in self._iter_strings(owner) if value]

    def _iter_strings(self, owner: str) -> Iterator[str]:
        for s in self._tag.find_all(string=True):
            if isinstance(s, Comment):
                continue
            if s.parent is not None and s.parent.name == owner:
                yield _clean(str(s))


class Document(Node):
    """A fetched results page."""

    @classmethod
    def from_html(cls, markup: str) -> "Document":
        return cls(BeautifulSoup(markup, "lxml"))


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def fetch_document(url: str, timeout: float = TIMEOUT_SEC,
                   session: Optional[requests.Session] = None) -> Document:
    """GET `url` and parse it. The page is always decoded as UTF-8."""
    http = session or build_session()
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Request for {url} failed: {exc}") from exc
    resp.encoding = "utf-8"
    return Document.from_html(resp.text)
