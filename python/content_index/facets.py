from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Set, Tuple, TypeVar

from colored_logger import get_colored_logger
from .post import Post

logger = get_colored_logger(__name__)

T = TypeVar("T")


class FacetKind(Enum):
    TAG = "tag"
    TOPIC = "topic"


def _count(values: Iterable[str]) -> List[Tuple[str, int]]:
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    # Stable: equal counts keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


@dataclass(frozen=True)
class FacetIndex:
    """
    Tag and topic usage across a post collection.

    Counts are sorted by popularity (most used first).
    """

    tag_counts: Tuple[Tuple[str, int], ...] = ()
    topic_counts: Tuple[Tuple[str, int], ...] = ()

    @classmethod
    def from_posts(cls, posts: Sequence[Post]) -> "FacetIndex":
        return cls(
            tag_counts=tuple(_count(tag for post in posts for tag in post.tags)),
            topic_counts=tuple(_count(topic for post in posts for topic in post.topics)),
        )

    def all_tags(self) -> List[str]:
        """Every tag once, alphabetically."""
        return sorted(tag for tag, _ in self.tag_counts)

    def all_topics(self) -> List[str]:
        return sorted(topic for topic, _ in self.topic_counts)


@dataclass
class FacetSelection:
    """
    Active tag and topic filters.

    A post matches when it carries every active tag and every active topic.
    """

    tags: Set[str] = field(default_factory=set)
    topics: Set[str] = field(default_factory=set)

    def __post_init__(self):
        # Empty strings can never match a post, so they are not valid filters
        self.tags = {tag for tag in self.tags if tag}
        self.topics = {topic for topic in self.topics if topic}

    @property
    def is_empty(self) -> bool:
        return not self.tags and not self.topics

    def _bucket(self, kind: FacetKind) -> Set[str]:
        return self.tags if kind is FacetKind.TAG else self.topics

    def toggle(self, value: str, kind: FacetKind = FacetKind.TAG) -> bool:
        """
        Switch a filter on or off.

        Returns:
            True if the filter is active after the call
        """
        bucket = self._bucket(kind)
        if value in bucket:
            bucket.discard(value)
            return False
        if value:
            bucket.add(value)
            return True
        return False

    def is_active(self, value: str, kind: FacetKind = FacetKind.TAG) -> bool:
        return value in self._bucket(kind)

    def clear(self) -> None:
        self.tags.clear()
        self.topics.clear()

    def matches(self, post: Post) -> bool:
        return self.tags.issubset(post.tags) and self.topics.issubset(post.topics)


def filter_posts(posts: Sequence[Post], selection: FacetSelection) -> List[Post]:
    """Keep posts that satisfy every active filter, preserving order."""
    if selection.is_empty:
        return list(posts)
    return [post for post in posts if selection.matches(post)]


def paginate(items: Sequence[T], pages: int, page_size: int) -> Tuple[List[T], bool]:
    """
    "Load more" pagination: the first `pages` pages are visible at once.

    Args:
        items: Full (already filtered) sequence
        pages: Number of loaded pages, at least 1
        page_size: Items per page

    Returns:
        (visible items, whether more items are available)
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")
    visible_count = max(pages, 1) * page_size
    return list(items[:visible_count]), visible_count < len(items)
