"""
Breadth-first crawl loop.

The frontier dequeues links, drops already visited ones, fetches the rest and
assigns sequential IDs to indexed pages until the queue runs dry or the page
cap is reached. Outbound links are recorded per source page and resolved into
edges afterwards by the graph builder.
"""
from __future__ import annotations

import math
import sys
import time
from collections import defaultdict, deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Deque, Dict, Iterable, List, Optional, Set, Union

from pagerank_spider.errors import EmptyFrontier, FetchDenied
from pagerank_spider.fetch import FetchAdapter
from pagerank_spider.links import Link

DEFAULT_MAX_COUNT = 10000


def page_id(count: int, max_count: int) -> str:
    """Return the ID for the ``count``-th indexed page, e.g. P00001."""
    width = int(math.floor(math.log10(max_count))) + 1
    return f"P{count:0{width}d}"


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_tried: int = 0
    pages_indexed: int = 0
    skip_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_skip(self, reason: str) -> None:
        self.skip_counts[reason] += 1


@dataclass(slots=True)
class CrawlResult:
    """What the crawl hands over to graph construction."""
    url_to_id: Dict[str, str]
    pending_edges: Dict[str, List[str]]
    stats: CrawlStats


@dataclass(slots=True)
class CrawlSession:
    """Mutable state of one crawl run."""
    max_count: int
    queue: Deque[Link] = field(default_factory=deque)
    visited: Set[Link] = field(default_factory=set)
    url_to_id: Dict[str, str] = field(default_factory=dict)
    pending_edges: Dict[str, List[str]] = field(default_factory=dict)
    processed: int = 0
    stats: CrawlStats = field(default_factory=CrawlStats)

    def __post_init__(self) -> None:
        if self.max_count <= 0:
            raise ValueError(f"max_count must be positive, got {self.max_count}")

    def has_work(self) -> bool:
        return bool(self.queue) and self.processed < self.max_count

    def assign_id(self, link: Link) -> str:
        self.processed += 1
        self.stats.pages_indexed = self.processed
        pid = page_id(self.processed, self.max_count)
        self.url_to_id[link.url] = pid
        return pid

    def result(self) -> CrawlResult:
        return CrawlResult(
            url_to_id=dict(self.url_to_id),
            pending_edges={src: list(dsts) for src, dsts in self.pending_edges.items()},
            stats=self.stats,
        )


def _log(verbose: bool, message: str) -> None:
    if verbose:
        sys.stderr.write(message + "\n")
        sys.stderr.flush()


class Frontier:
    """Drives a breadth-first crawl over a fetch adapter."""

    def __init__(
        self,
        fetcher: FetchAdapter,
        max_count: int = DEFAULT_MAX_COUNT,
        output_dir: Optional[Path] = None,
        throttle_s: float = 0.0,
        verbose: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.max_count = max_count
        self.output_dir = output_dir
        self.throttle_s = throttle_s
        self.verbose = verbose
        self._sleep = sleep

    def run(self, start: Union[Link, Iterable[Link], None]) -> CrawlResult:
        """
        Crawl from ``start`` and return the URL to ID index and pending edges.

        Raises EmptyFrontier if there is nothing to visit.
        """
        if start is None:
            seeds: List[Link] = []
        elif isinstance(start, Link):
            seeds = [start]
        else:
            seeds = list(start)

        session = CrawlSession(max_count=self.max_count, queue=deque(seeds))
        if not session.queue:
            raise EmptyFrontier("Exiting: no pages to visit.")

        while session.has_work():
            if self.throttle_s > 0:
                self._sleep(self.throttle_s)
            self._step(session)

        return session.result()

    def _step(self, session: CrawlSession) -> None:
        raw = session.queue.popleft()
        session.stats.pages_tried += 1
        try:
            link = raw.canonicalize()
        except ValueError:
            _log(self.verbose, f"Invalid link: {raw}")
            session.stats.record_skip("invalid")
            return

        _log(self.verbose, f"Trying: {link}")
        if link in session.visited:
            _log(self.verbose, "Already visited")
            session.stats.record_skip("already_visited")
            return
        session.visited.add(link)

        if not self.fetcher.is_processable(link):
            _log(self.verbose, "Not HTML page")
            session.stats.record_skip("not_html")
            return

        try:
            page = self.fetcher.fetch(link)
        except FetchDenied as e:
            _log(self.verbose, f"Disallowed: {link}" + (f" (rule {e.rule})" if e.rule else ""))
            session.stats.record_skip("disallowed")
            return

        if page.empty:
            _log(self.verbose, "No page found")
            session.stats.record_skip("unavailable")
            return

        if page.is_indexable():
            pid = session.assign_id(link)
            _log(self.verbose, f"Indexing({session.processed}): {link}")
            if self.output_dir is not None:
                try:
                    page.persist(self.output_dir, pid)
                except OSError as e:
                    # The page keeps its ID; only the cached copy is missing
                    _log(self.verbose, f"Could not save {pid}: {e}")
                    session.stats.record_skip("persist_failed")

        outbound: List[Link] = []
        for out in page.outbound():
            try:
                outbound.append(out.canonicalize())
            except ValueError:
                continue
        # Edges of the page that hit the cap are kept; its links are not queued
        session.pending_edges[link.url] = [out.url for out in outbound]
        if session.processed < session.max_count:
            session.queue.extend(outbound)


def crawl(
    start: Union[Link, Iterable[Link], None],
    fetcher: FetchAdapter,
    max_count: int = DEFAULT_MAX_COUNT,
    output_dir: Optional[Path] = None,
    throttle_s: float = 0.0,
    verbose: bool = False,
) -> CrawlResult:
    """Run a breadth-first crawl. See :class:`Frontier`."""
    frontier = Frontier(
        fetcher,
        max_count=max_count,
        output_dir=output_dir,
        throttle_s=throttle_s,
        verbose=verbose,
    )
    return frontier.run(start)
