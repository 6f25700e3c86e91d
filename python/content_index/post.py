import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, Optional, Tuple, Union

from .frontmatter import SourceFormat

EPOCH_DATE = "1970-01-01"

_EXTENSION = re.compile(r"\.[^./]+$")
_WHITESPACE = re.compile(r"\s+")
_NON_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")


def derive_slug(relative_path: Union[str, PurePath]) -> str:
    """
    Build a URL-safe slug from a path relative to the content root.

    "My Post.md" -> "my-post", "guides/intro.mdx" -> "guides-intro".
    Distinct paths can map to the same slug; the indexer reports that.
    """
    slug = _EXTENSION.sub("", PurePath(relative_path).as_posix())
    slug = _WHITESPACE.sub("-", slug)
    slug = _NON_SLUG_CHARS.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.lower()


@dataclass(frozen=True)
class RenderSource:
    """
    The untouched source of a post, handed through to the render layer.

    The indexer never looks inside; display uses this, search uses Post.body.
    """

    path: str
    raw: str
    fmt: SourceFormat


@dataclass(frozen=True)
class Post:
    """A single indexed blog post. Immutable once the index is built."""

    slug: str
    title: str
    excerpt: str = ""
    date: str = EPOCH_DATE
    tags: Tuple[str, ...] = ()
    topics: Tuple[str, ...] = ()
    auto_hashtags: Tuple[str, ...] = ()
    cover: Optional[str] = None
    body: str = ""
    render: Optional[RenderSource] = field(default=None, repr=False, compare=False)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def has_topic(self, topic: str) -> bool:
        return topic in self.topics

    def to_dict(self, include_body: bool = False) -> Dict[str, Any]:
        data = {
            "slug": self.slug,
            "title": self.title,
            "excerpt": self.excerpt,
            "date": self.date,
            "tags": list(self.tags),
            "topics": list(self.topics),
            "autoHashtags": list(self.auto_hashtags),
            "cover": self.cover,
            "source": self.render.path if self.render else None,
        }
        if include_body:
            data["body"] = self.body
        return data
