"""
Page retrieval over HTTP and the page model handed to the frontier.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Set, Tuple
from urllib.parse import urlparse, urlunparse

import requests
from bs4 import BeautifulSoup, SoupStrainer

from pagerank_spider.errors import FetchDenied
from pagerank_spider.links import Link, is_html_link, resolve_link

# SoupStrainer to parse only <a> tags (faster link extraction)
LINK_STRAINER = SoupStrainer("a", href=True)
META_STRAINER = SoupStrainer("meta")

_HEAD_TAG = re.compile(r"<head[^>]*>", re.IGNORECASE)


@dataclass(slots=True)
class CrawledPage:
    """Result of fetching one link."""
    link: Link
    html: str = ""
    outbound_links: List[Link] = field(default_factory=list)
    indexable: bool = True
    empty: bool = False

    @classmethod
    def unavailable(cls, link: Link) -> CrawledPage:
        return cls(link=link, indexable=False, empty=True)

    def is_indexable(self) -> bool:
        return self.indexable and not self.empty

    def outbound(self) -> List[Link]:
        return list(self.outbound_links)

    def persist(self, target_dir: Path, page_id: str) -> Path:
        """
        Write the page to ``<target_dir>/<page_id>.html``.

        A <base> element pointing at the original URL is added so relative
        links still resolve from the cached copy.
        """
        target_dir.mkdir(parents=True, exist_ok=True)
        base_tag = f'<base href="{self.link.url}">'
        match = _HEAD_TAG.search(self.html)
        if match:
            html = self.html[:match.end()] + base_tag + self.html[match.end():]
        else:
            html = base_tag + "\n" + self.html
        path = target_dir / f"{page_id}.html"
        path.write_text(html, encoding="utf-8")
        return path


class FetchAdapter(Protocol):
    """What the frontier needs from a page retriever."""

    def is_processable(self, link: Link) -> bool:
        ...

    def fetch(self, link: Link) -> CrawledPage:
        ...


def extract_links(html: str, base: Link) -> List[Link]:
    """Extract canonical outbound links from <a> tags, in document order."""
    soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)
    links: List[Link] = []
    for a in soup.find_all("a", href=True):
        target = resolve_link(a["href"], base)
        if target is not None:
            links.append(target)
    return links


def parse_robots_meta(html: str) -> Tuple[bool, bool]:
    """Return (index_allowed, follow_allowed) from a robots META tag."""
    soup = BeautifulSoup(html, "lxml", parse_only=META_STRAINER)
    index_ok, follow_ok = True, True
    for meta in soup.find_all("meta"):
        if (meta.get("name") or "").strip().lower() != "robots":
            continue
        directives = {d.strip().lower() for d in (meta.get("content") or "").split(",")}
        if "noindex" in directives or "none" in directives:
            index_ok = False
        if "nofollow" in directives or "none" in directives:
            follow_ok = False
    return index_ok, follow_ok


class HttpFetcher:
    """Fetch adapter backed by a requests session."""

    def __init__(
        self,
        timeout_s: float = 15.0,
        user_agent: str = "PageRankSpider/1.0",
        obey_robots: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.obey_robots = obey_robots
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self._robots: Dict[Tuple[str, str], Set[str]] = {}

    def is_processable(self, link: Link) -> bool:
        return is_html_link(link)

    def fetch(self, link: Link) -> CrawledPage:
        """
        Retrieve ``link``.

        Raises FetchDenied when robots.txt disallows the path. Network errors,
        HTTP errors and non-HTML responses give an empty page.
        """
        if self.obey_robots:
            rule = self._blocking_rule(link)
            if rule is not None:
                raise FetchDenied(link, rule)

        try:
            resp = self.session.get(link.url, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException:
            return CrawledPage.unavailable(link)

        if resp.status_code >= 400:
            return CrawledPage.unavailable(link)

        content_type = (resp.headers.get("content-type") or "").lower()
        if "text/html" not in content_type:
            return CrawledPage.unavailable(link)

        html = resp.text
        if not html.strip():
            return CrawledPage.unavailable(link)

        index_ok, follow_ok = parse_robots_meta(html) if self.obey_robots else (True, True)
        outbound = extract_links(html, link) if follow_ok else []
        return CrawledPage(link=link, html=html, outbound_links=outbound, indexable=index_ok)

    def _blocking_rule(self, link: Link) -> Optional[str]:
        origin = link.origin
        if origin not in self._robots:
            self._robots[origin] = self._load_robots_rules(origin)
        path = urlparse(link.url).path
        for rule in sorted(self._robots[origin]):
            if path.startswith(rule):
                return rule
        return None

    def _load_robots_rules(self, origin: Tuple[str, str]) -> Set[str]:
        """Load disallow rules for ``User-agent: *`` from robots.txt."""
        disallow_rules: Set[str] = set()
        robots_url = urlunparse((origin[0], origin[1], "/robots.txt", "", "", ""))
        try:
            resp = self.session.get(robots_url, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException:
            # No robots.txt reachable: nothing is disallowed
            return disallow_rules

        if resp.status_code != 200:
            return disallow_rules
        if "text" not in (resp.headers.get("content-type") or "").lower():
            return disallow_rules

        ua_star = False
        for line in resp.text.splitlines():
            line = line.split("#", 1)[0].strip()
            if not line:
                continue

            lower_line = line.lower()
            if lower_line.startswith("user-agent:"):
                ua_star = line.split(":", 1)[1].strip() == "*"
            elif ua_star and lower_line.startswith("disallow:"):
                path = line.split(":", 1)[1].strip()
                if path:
                    disallow_rules.add(path)

        return disallow_rules
