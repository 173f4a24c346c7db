"""
Breadth-first web spider that ranks the pages it indexed with PageRank.
"""
from pagerank_spider.errors import EmptyFrontier, FetchDenied, SpiderError
from pagerank_spider.fetch import CrawledPage, HttpFetcher
from pagerank_spider.frontier import CrawlResult, Frontier, crawl
from pagerank_spider.graph import Graph, Node, build_graph
from pagerank_spider.links import Link
from pagerank_spider.rank import pagerank
from pagerank_spider.report import write_rank_report

__version__ = "1.0.0"
__all__ = [
    "CrawlResult",
    "CrawledPage",
    "EmptyFrontier",
    "FetchDenied",
    "Frontier",
    "Graph",
    "HttpFetcher",
    "Link",
    "Node",
    "SpiderError",
    "build_graph",
    "crawl",
    "pagerank",
    "write_rank_report",
]
