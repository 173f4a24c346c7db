"""
Run configuration for the spider.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pagerank_spider.frontier import DEFAULT_MAX_COUNT
from pagerank_spider.links import canonical_url
from pagerank_spider.rank import DEFAULT_ALPHA, DEFAULT_PASSES


@dataclass(slots=True)
class SpiderConfig:
    start_url: str
    max_count: int = DEFAULT_MAX_COUNT
    output_dir: Optional[Path] = None
    obey_robots: bool = False
    slow: bool = False
    alpha: float = DEFAULT_ALPHA
    passes: int = DEFAULT_PASSES
    timeout_s: float = 15.0
    user_agent: str = "PageRankSpider/1.0"
    throttle_s: float = 1.0  # pause between pages when slow is set
    verbose: bool = False

    def __post_init__(self) -> None:
        if canonical_url(self.start_url) is None:
            raise ValueError(f"Invalid start URL: {self.start_url}")
        if self.max_count <= 0:
            raise ValueError(f"max_count must be positive, got {self.max_count}")
        if not 0.0 < self.alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")
        if self.passes < 1:
            raise ValueError(f"passes must be at least 1, got {self.passes}")
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @property
    def effective_throttle_s(self) -> float:
        return self.throttle_s if self.slow else 0.0
