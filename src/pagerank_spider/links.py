"""
Link canonicalization and resource-type checks.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlparse, urlunparse, urldefrag

# Extensions that never lead to an HTML page (frozen set for O(1) lookup)
NON_HTML_EXTENSIONS: frozenset[str] = frozenset((
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp", ".tif", ".tiff",
    ".pdf", ".ps", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    ".zip", ".rar", ".7z", ".gz", ".tar", ".tgz",
    ".mp4", ".mp3", ".wav", ".webm", ".avi", ".mov",
    ".css", ".js", ".map", ".ico", ".xml", ".json",
    ".woff", ".woff2", ".ttf", ".eot",
))


def canonical_url(url: str, base: Optional[str] = None) -> Optional[str]:
    """
    Normalize URL for deduplication and comparison.

    - Joins relative URLs against base
    - Drops fragments (#...)
    - Normalizes scheme/host case
    - Removes default ports (:80, :443)
    - Keeps querystrings (they matter for uniqueness)

    Returns None for empty references and non-http(s) schemes.
    """
    if not url or not url.strip():
        return None

    url = url.strip()
    joined, _ = urldefrag(urljoin(base, url) if base else url)
    parsed = urlparse(joined)

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https"):
        return None

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return None

    try:
        port = parsed.port
    except ValueError:
        return None

    if (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        netloc = hostname
    elif port:
        netloc = f"{hostname}:{port}"
    else:
        netloc = hostname

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        ""  # No fragment
    ))


@dataclass(frozen=True, slots=True)
class Link:
    """An absolute URL reference. Equal and hashed by its URL string."""
    url: str

    def canonicalize(self) -> Link:
        """Return the canonical form of this link."""
        cleaned = canonical_url(self.url)
        if cleaned is None:
            raise ValueError(f"Not a crawlable URL: {self.url!r}")
        return Link(cleaned)

    @property
    def origin(self) -> tuple[str, str]:
        parsed = urlparse(self.url)
        return parsed.scheme, parsed.netloc

    def __str__(self) -> str:
        return self.url


def resolve_link(href: str, base: Link) -> Optional[Link]:
    """Resolve an href found on ``base`` into a canonical Link, or None."""
    target = canonical_url(href, base=base.url)
    return Link(target) if target else None


def is_html_link(link: Link) -> bool:
    """Check the link does not point at a known non-HTML resource."""
    path_lower = (urlparse(link.url).path or "").lower()
    return not any(path_lower.endswith(ext) for ext in NON_HTML_EXTENSIONS)
