"""
Static feed artifacts (sitemap and RSS) generated from the content index.
"""

from .sitemap import build_sitemap
from .rss import build_rss
from .generator import FeedGenerator

__all__ = [
    "build_sitemap",
    "build_rss",
    "FeedGenerator",
]
