from __future__ import annotations

import pytest
import requests

from pagerank_spider.errors import FetchDenied
from pagerank_spider.fetch import CrawledPage, HttpFetcher, extract_links, parse_robots_meta
from pagerank_spider.links import Link

PAGE = """\
<html>
<head><title>Home</title>{meta}</head>
<body>
  <a href="/a">A</a>
  <a href="b.html#frag">B</a>
  <a href="http://other.example.org/">Other</a>
  <a href="mailto:me@example.com">Mail</a>
  <a href="/a">A again</a>
</body>
</html>
"""


class FakeResponse:
    def __init__(self, status_code=200, text="", content_type="text/html; charset=utf-8"):
        self.status_code = status_code
        self.text = text
        self.headers = {"content-type": content_type}


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.headers = {}
        self.requested = []

    def get(self, url, timeout=None, allow_redirects=True):
        self.requested.append(url)
        response = self.responses.get(url)
        if response is None:
            raise requests.ConnectionError(f"no route to {url}")
        return response


def _fetcher(responses, obey_robots=False):
    session = FakeSession(responses)
    return HttpFetcher(obey_robots=obey_robots, session=session, user_agent="TestBot"), session


def test_extract_links_keeps_document_order_and_duplicates():
    links = extract_links(PAGE.format(meta=""), Link("http://example.com/dir/"))
    assert [l.url for l in links] == [
        "http://example.com/a",
        "http://example.com/dir/b.html",
        "http://other.example.org/",
        "http://example.com/a",
    ]


@pytest.mark.parametrize(
    "meta, expected",
    [
        ("", (True, True)),
        ('<meta name="robots" content="noindex">', (False, True)),
        ('<meta name="ROBOTS" content="NOFOLLOW">', (True, False)),
        ('<meta name="robots" content="none">', (False, False)),
        ('<meta name="description" content="noindex">', (True, True)),
    ],
)
def test_parse_robots_meta(meta, expected):
    assert parse_robots_meta(PAGE.format(meta=meta)) == expected


def test_fetch_html_page():
    fetcher, session = _fetcher({"http://example.com/": FakeResponse(text=PAGE.format(meta=""))})
    page = fetcher.fetch(Link("http://example.com/"))

    assert session.headers["User-Agent"] == "TestBot"
    assert not page.empty
    assert page.is_indexable()
    assert page.outbound()[0] == Link("http://example.com/a")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=404, text="missing"),
        FakeResponse(text="%PDF", content_type="application/pdf"),
        FakeResponse(text="   "),
    ],
)
def test_fetch_failures_give_empty_page(response):
    fetcher, _ = _fetcher({"http://example.com/x": response})
    page = fetcher.fetch(Link("http://example.com/x"))
    assert page.empty
    assert not page.is_indexable()


def test_network_error_gives_empty_page():
    fetcher, _ = _fetcher({})
    assert fetcher.fetch(Link("http://example.com/down")).empty


def test_robots_txt_disallow_raises_fetch_denied():
    robots = "User-agent: googlebot\nDisallow: /\n\nUser-agent: *\nDisallow: /private # keep out\n"
    fetcher, session = _fetcher(
        {
            "http://example.com/robots.txt": FakeResponse(text=robots, content_type="text/plain"),
            "http://example.com/public": FakeResponse(text=PAGE.format(meta="")),
        },
        obey_robots=True,
    )
    with pytest.raises(FetchDenied) as exc_info:
        fetcher.fetch(Link("http://example.com/private/page"))
    assert exc_info.value.rule == "/private"

    assert not fetcher.fetch(Link("http://example.com/public")).empty
    # robots.txt is loaded once per origin
    assert session.requested.count("http://example.com/robots.txt") == 1


def test_robots_ignored_unless_obeyed():
    meta = '<meta name="robots" content="noindex,nofollow">'
    fetcher, session = _fetcher({"http://example.com/": FakeResponse(text=PAGE.format(meta=meta))})
    page = fetcher.fetch(Link("http://example.com/"))
    assert page.is_indexable()
    assert page.outbound()
    assert "http://example.com/robots.txt" not in session.requested


def test_robots_meta_honoured_when_obeyed():
    meta = '<meta name="robots" content="noindex,nofollow">'
    fetcher, _ = _fetcher(
        {"http://example.com/": FakeResponse(text=PAGE.format(meta=meta))},
        obey_robots=True,
    )
    page = fetcher.fetch(Link("http://example.com/"))
    assert not page.empty
    assert not page.is_indexable()
    assert page.outbound() == []


def test_persist_adds_base_tag(tmp_path):
    page = CrawledPage(link=Link("http://example.com/"), html="<html><HEAD><title>t</title></HEAD></html>")
    path = page.persist(tmp_path / "out", "P001")
    assert path == tmp_path / "out" / "P001.html"
    assert path.read_text(encoding="utf-8").startswith('<html><HEAD><base href="http://example.com/">')


def test_processable_rejects_non_html_links():
    fetcher, _ = _fetcher({})
    assert fetcher.is_processable(Link("http://example.com/page"))
    assert not fetcher.is_processable(Link("http://example.com/file.zip"))
