"""
Exceptions raised by the spider.
"""


class SpiderError(Exception):
    """Base class for spider errors."""


class EmptyFrontier(SpiderError):
    """Raised when a crawl is started with nothing to visit."""


class FetchDenied(SpiderError):
    """Raised by a fetcher when robots rules disallow a link."""

    def __init__(self, link, rule: str = "") -> None:
        self.link = link
        self.rule = rule
        detail = f" (Disallow: {rule})" if rule else ""
        super().__init__(f"Path disallowed by robots.txt: {link}{detail}")
