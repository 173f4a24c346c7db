"""
Command-line interface for the spider.
"""
from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

from pagerank_spider.config import SpiderConfig
from pagerank_spider.errors import EmptyFrontier
from pagerank_spider.fetch import FetchAdapter, HttpFetcher
from pagerank_spider.frontier import DEFAULT_MAX_COUNT, CrawlStats, crawl
from pagerank_spider.graph import Graph, build_graph
from pagerank_spider.links import Link
from pagerank_spider.rank import DEFAULT_ALPHA, DEFAULT_PASSES, pagerank
from pagerank_spider.report import format_rank_lines, write_rank_report


def print_summary(stats: CrawlStats, graph: Graph) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Links tried:            {stats.pages_tried}\n")
    sys.stderr.write(f"Pages indexed:          {stats.pages_indexed}\n")
    sys.stderr.write(f"Graph edges:            {graph.edge_count}\n\n")

    if stats.skip_counts:
        sys.stderr.write("Skipped by reason:\n")
        for reason, count in sorted(stats.skip_counts.items()):
            sys.stderr.write(f"  {reason}: {count}\n")
    else:
        sys.stderr.write("Nothing skipped.\n")

    sys.stderr.write("\n")


def run(config: SpiderConfig, fetcher: Optional[FetchAdapter] = None) -> Dict[str, float]:
    """Crawl, build the link graph and rank it. Returns the rank table."""
    if fetcher is None:
        fetcher = HttpFetcher(
            timeout_s=config.timeout_s,
            user_agent=config.user_agent,
            obey_robots=config.obey_robots,
        )

    result = crawl(
        Link(config.start_url),
        fetcher,
        max_count=config.max_count,
        output_dir=config.output_dir,
        throttle_s=config.effective_throttle_s,
        verbose=config.verbose,
    )
    graph = build_graph(result.url_to_id, result.pending_edges)

    if config.verbose:
        print_summary(result.stats, graph)

    # Nothing indexed, nothing to rank
    if len(graph) == 0:
        return {}
    return pagerank(graph, alpha=config.alpha, passes=config.passes)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crawl pages breadth-first from a URL and rank them with PageRank."
    )
    parser.add_argument("-u", "--url", required=True, help="Start URL (e.g. https://example.com)")
    parser.add_argument(
        "-c", "--max-count", type=int, default=DEFAULT_MAX_COUNT,
        help=f"Index at most this many pages (default: {DEFAULT_MAX_COUNT})",
    )
    parser.add_argument("-d", "--dir", help="Store indexed pages and page_ranks.txt in this directory")
    parser.add_argument("--safe", action="store_true", help="Obey robots.txt and robots META tags")
    parser.add_argument("--slow", action="store_true", help="Pause briefly before getting each page")
    parser.add_argument(
        "--alpha", type=float, default=DEFAULT_ALPHA,
        help=f"Teleportation probability (default: {DEFAULT_ALPHA})",
    )
    parser.add_argument(
        "--passes", type=int, default=DEFAULT_PASSES,
        help=f"Number of PageRank passes (default: {DEFAULT_PASSES})",
    )
    parser.add_argument("--timeout", type=float, default=15.0, help="Request timeout in seconds (default: 15)")
    parser.add_argument("--user-agent", default="PageRankSpider/1.0", help="User-Agent header")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the spider CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = SpiderConfig(
            start_url=args.url,
            max_count=args.max_count,
            output_dir=args.dir,
            obey_robots=args.safe,
            slow=args.slow,
            alpha=args.alpha,
            passes=args.passes,
            timeout_s=args.timeout,
            user_agent=args.user_agent,
            verbose=args.verbose,
        )
        ranks = run(config)
    except (EmptyFrontier, ValueError) as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    if not ranks:
        sys.stderr.write("No pages indexed.\n")
        return 0

    if config.output_dir is not None:
        path = write_rank_report(ranks, config.output_dir)
        if config.verbose:
            sys.stderr.write(f"Ranks written to: {path}\n")
    else:
        for line in format_rank_lines(ranks):
            print(line)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
