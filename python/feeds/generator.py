from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

from colored_logger import get_colored_logger
from content_index.indexer import ContentIndexer
from io_ops.file_manager import FileManager
from settings import DEFAULT_SITE_URL
from .rss import build_rss
from .sitemap import build_sitemap

logger = get_colored_logger(__name__)

SITEMAP_FILENAME = "sitemap.xml"
RSS_FILENAME = "rss.xml"


class FeedGenerator:
    """
    Offline generator for sitemap.xml and rss.xml.

    Reads posts through the same ContentIndexer the search path uses, so
    both see identical slugs, titles and dates.
    """

    def __init__(self, settings, indexer: Optional[ContentIndexer] = None):
        """
        Args:
            settings: Settings instance (site metadata, content root, output dir)
            indexer: ContentIndexer to read posts from. If None, built from settings.
        """
        self.settings = settings
        self.indexer = indexer or ContentIndexer.from_settings(settings)

    def generate(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Path]:
        """
        Build the index and write both artifacts.

        Raises:
            ContentDiscoveryError: content root missing or unreadable
            SlugCollisionError: duplicate slugs while strict slugs are enabled
            OSError: artifacts could not be written

        Returns:
            Mapping of artifact name to written path
        """
        if self.settings.site_url == DEFAULT_SITE_URL:
            logger.notice(
                "SITE_URL is not configured, feed links point to %s", DEFAULT_SITE_URL
            )

        posts = self.indexer.build_index(strict_discovery=True)
        target = FileManager.resolve_output_dir(output_dir or self.settings.output_dir)

        sitemap = build_sitemap(
            posts, self.settings.site_url, self.settings.static_routes, now=now
        )
        rss = build_rss(
            posts,
            self.settings.site_url,
            self.settings.site_title,
            self.settings.site_description,
        )

        written = {
            "sitemap": target / SITEMAP_FILENAME,
            "rss": target / RSS_FILENAME,
        }
        FileManager.write_to_file(written["sitemap"], sitemap)
        FileManager.write_to_file(written["rss"], rss)

        logger.success(
            "Sitemap & RSS generated (%d posts) in %s", len(posts), target
        )
        return written
