from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Optional

import pytest

from pagerank_spider.errors import FetchDenied
from pagerank_spider.fetch import CrawledPage
from pagerank_spider.links import Link, is_html_link

BASE = "http://example.com"


def url(name: str) -> str:
    return f"{BASE}/{name}"


class FakeFetcher:
    """In-memory site: page name -> outbound page names."""

    def __init__(
        self,
        site: Dict[str, Iterable[str]],
        denied: Iterable[str] = (),
        noindex: Iterable[str] = (),
    ) -> None:
        self.site = {url(name): [url(t) for t in targets] for name, targets in site.items()}
        self.denied = {url(name) for name in denied}
        self.noindex = {url(name) for name in noindex}
        self.calls: Counter = Counter()

    def is_processable(self, link: Link) -> bool:
        return is_html_link(link)

    def fetch(self, link: Link) -> CrawledPage:
        self.calls[link.url] += 1
        if link.url in self.denied:
            raise FetchDenied(link)
        targets: Optional[list] = self.site.get(link.url)
        if targets is None:
            return CrawledPage.unavailable(link)
        return CrawledPage(
            link=link,
            html=f"<html><head></head><body>{link.url}</body></html>",
            outbound_links=[Link(t) for t in targets],
            indexable=link.url not in self.noindex,
        )


@pytest.fixture
def make_fetcher():
    return FakeFetcher
