"""
Rank report output.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Mapping

REPORT_NAME = "page_ranks.txt"


def format_rank_lines(ranks: Mapping[str, float]) -> List[str]:
    return [f"{page_id}.html {rank!r}" for page_id, rank in ranks.items()]


def write_rank_report(ranks: Mapping[str, float], output_dir: Path) -> Path:
    """Write ``page_ranks.txt`` into ``output_dir``. Write errors are ignored."""
    path = Path(output_dir) / REPORT_NAME
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(line + "\n" for line in format_rank_lines(ranks)), encoding="utf-8")
    except OSError:
        pass
    return path
