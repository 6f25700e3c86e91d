import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from colored_logger import get_colored_logger
from .errors import SlugCollisionError
from .file_scanner import ContentFile, FileScanner
from .frontmatter import Frontmatter, FrontmatterValue, parse_source
from .hashtag import DEFAULT_MAX_TAGS, KeywordExtractor
from .post import EPOCH_DATE, Post, RenderSource, derive_slug
from .stopwords import StopwordSet

logger = get_colored_logger(__name__)

PROGRESS_INTERVAL = 100
DATE_FORMAT = "%Y-%m-%d"


def _text_value(value: Optional[FrontmatterValue]) -> Optional[str]:
    """Strings and dates as-is, numbers stringified; other shapes ignored."""
    if value is None:
        return None
    text = value.as_string()
    if text is not None:
        return text
    number = value.as_number()
    if number is not None:
        return str(number)
    return None


def _string_list(value: Optional[FrontmatterValue]) -> List[str]:
    if value is None:
        return []
    items = value.as_list()
    if items is None:
        return []
    return [item.strip() for item in items if item and item.strip()]


def merge_tags(explicit: List[str], auto: List[str]) -> Tuple[str, ...]:
    """Union of explicit and auto tags, first-seen order, no duplicates."""
    merged = dict.fromkeys(tag for tag in explicit + auto if tag)
    return tuple(merged)


class ContentIndexer:
    """
    Builds the in-memory Post collection from a content root.

    The collection is built once (lazily on first access or explicitly via
    build_index) and treated as immutable afterwards. Readers get copies or
    single Post references, never the internal list.

    Features:
    - Markdown/MDX and JSX sources with front-matter headers
    - Explicit tags merged with auto-extracted hashtags
    - Slug collision detection (warn, or fail fast in strict mode)
    - Per-file failures are logged and skipped, never abort the build
    """

    def __init__(
        self,
        content_root: Union[str, Path],
        extractor: Optional[KeywordExtractor] = None,
        scanner: Optional[FileScanner] = None,
        max_hashtags: int = DEFAULT_MAX_TAGS,
        strict_slugs: bool = False,
    ):
        """
        Initialize the content indexer.

        Args:
            content_root: Directory containing the content sources
            extractor: KeywordExtractor instance. If None, one is created with
                the bundled stopword list.
            scanner: FileScanner instance. If None, creates default instance.
            max_hashtags: Number of auto hashtags per post
            strict_slugs: Raise SlugCollisionError on duplicate slugs
        """
        self.content_root = Path(content_root)
        self.extractor = extractor or KeywordExtractor(StopwordSet.load())
        self.scanner = scanner or FileScanner()
        self.max_hashtags = max_hashtags
        self.strict_slugs = strict_slugs

        self._posts: Optional[Tuple[Post, ...]] = None
        self.collisions: Dict[str, List[str]] = {}
        self.stats = self._empty_stats()

    @classmethod
    def from_settings(cls, settings, strict_slugs: Optional[bool] = None) -> "ContentIndexer":
        """Create an indexer from a Settings object."""
        stopwords = StopwordSet.load(settings.stopwords_file)
        return cls(
            content_root=settings.content_root,
            extractor=KeywordExtractor(stopwords),
            max_hashtags=settings.max_hashtags,
            strict_slugs=settings.strict_slugs if strict_slugs is None else strict_slugs,
        )

    def build_index(self, strict_discovery: bool = False) -> List[Post]:
        """
        Scan the content root and build the Post collection.

        Args:
            strict_discovery: Propagate ContentDiscoveryError for a missing or
                unreadable root (batch use). Otherwise an empty index is built.

        Returns:
            Posts sorted by date, newest first
        """
        self.stats = self._empty_stats()
        self.stats["start_time"] = time.time()
        self.collisions = {}

        files = self.scanner.discover(self.content_root, strict=strict_discovery)
        self.stats["files_discovered"] = len(files)
        self.stats["discovery"] = self.scanner.stats.to_dict()
        logger.info("Indexing %d content files from %s", len(files), self.content_root)

        posts: List[Post] = []
        first_path_by_slug: Dict[str, str] = {}

        for i, content_file in enumerate(files, 1):
            if i % PROGRESS_INTERVAL == 0:
                logger.progress("Processed %d/%d files", i, len(files))

            post = self._index_file(content_file)
            if post is None:
                continue

            first_path = first_path_by_slug.setdefault(post.slug, content_file.relative_path)
            if first_path != content_file.relative_path:
                paths = self.collisions.setdefault(post.slug, [first_path])
                paths.append(content_file.relative_path)
                logger.warning(
                    "Slug collision for '%s': %s and %s (lookups return the first)",
                    post.slug,
                    first_path,
                    content_file.relative_path,
                )

            posts.append(post)

        self.stats["slug_collisions"] = len(self.collisions)
        if self.collisions and self.strict_slugs:
            self._finalize_stats()
            raise SlugCollisionError(self.collisions)

        # Stable sort: equal dates keep discovery order
        posts.sort(key=lambda p: p.date, reverse=True)
        self._posts = tuple(posts)

        self._finalize_stats()
        return list(self._posts)

    def rebuild(self) -> List[Post]:
        """Drop the current collection and build it again."""
        self.invalidate()
        return self.build_index()

    def invalidate(self) -> None:
        """Forget the collection; the next read triggers a fresh build."""
        self._posts = None

    @property
    def is_built(self) -> bool:
        return self._posts is not None

    def get_all_posts(self) -> List[Post]:
        """Return a fresh list of all posts (newest first) on every call."""
        return list(self._ensure_built())

    def get_post_by_slug(self, slug: str) -> Optional[Post]:
        """Return the first post with the given slug, or None if unknown."""
        for post in self._ensure_built():
            if post.slug == slug:
                return post
        return None

    def get_indexing_stats(self) -> Dict[str, Any]:
        return self.stats.copy()

    def _ensure_built(self) -> Tuple[Post, ...]:
        if self._posts is None:
            self.build_index()
        return self._posts

    def _index_file(self, content_file: ContentFile) -> Optional[Post]:
        try:
            with open(content_file.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", content_file.path, e)
            self.stats["files_failed"] += 1
            return None

        try:
            post = self.build_post(content_file, raw)
        except Exception as e:
            logger.error("Failed to index %s: %s", content_file.path, e)
            self.stats["files_failed"] += 1
            return None

        self.stats["files_indexed"] += 1
        logger.debug("Indexed %s as '%s'", content_file.relative_path, post.slug)
        return post

    def build_post(self, content_file: ContentFile, raw: str) -> Post:
        """Turn one raw source into a Post."""
        relative_path = content_file.relative_path
        parsed = parse_source(raw, content_file.fmt)
        if not parsed.has_header:
            self.stats["files_without_header"] += 1
            logger.debug("No front matter header in %s", relative_path)

        fm: Frontmatter = parsed.frontmatter
        slug = derive_slug(relative_path)
        auto_hashtags = self.extractor.extract(parsed.body, self.max_hashtags)
        # An explicit empty title is kept; only a missing one falls back
        title = _text_value(fm.get("title"))

        return Post(
            slug=slug,
            title=slug if title is None else title,
            excerpt=_text_value(fm.get("excerpt")) or "",
            date=self._resolve_date(fm.get("date"), relative_path),
            tags=merge_tags(_string_list(fm.get("tags")), auto_hashtags),
            topics=tuple(dict.fromkeys(_string_list(fm.get("topics")))),
            auto_hashtags=tuple(auto_hashtags),
            cover=_text_value(fm.get("cover")) or None,
            body=parsed.body,
            render=RenderSource(
                path=str(content_file.path), raw=raw, fmt=content_file.fmt
            ),
        )

    def _resolve_date(self, value: Optional[FrontmatterValue], relative_path: str) -> str:
        if value is None:
            return EPOCH_DATE
        date = value.as_date()
        if date is not None:
            try:
                datetime.strptime(date, DATE_FORMAT)
            except ValueError:
                date = None
        if date is None:
            logger.warning(
                "Invalid date %r in %s, using %s",
                value.to_python(),
                relative_path,
                EPOCH_DATE,
            )
            return EPOCH_DATE
        return date

    def _empty_stats(self) -> Dict[str, Any]:
        return {
            "files_discovered": 0,
            "files_indexed": 0,
            "files_failed": 0,
            "files_without_header": 0,
            "slug_collisions": 0,
            "discovery": {},
            "start_time": 0,
            "end_time": 0,
            "elapsed_time": 0,
        }

    def _finalize_stats(self) -> None:
        self.stats["end_time"] = time.time()
        self.stats["elapsed_time"] = self.stats["end_time"] - self.stats["start_time"]

        logger.info(
            "Indexing complete. Discovered: %d, Indexed: %d, Failed: %d, Collisions: %d (%.2fs)",
            self.stats["files_discovered"],
            self.stats["files_indexed"],
            self.stats["files_failed"],
            self.stats["slug_collisions"],
            self.stats["elapsed_time"],
        )
