"""
Blog Content Index

Discovers content sources, parses their front matter, derives slugs and
auto hashtags, and serves fuzzy full-text search with tag/topic facets.
Shared by the interactive search CLI and the offline feed generator.

Key Components:
- StopwordSet / KeywordExtractor: ranked keyword extraction
- parse_markdown / parse_jsx: front-matter parsing into tagged values
- ContentIndexer: builds the immutable Post collection
- SearchEngine / SearchSession: fuzzy search, facets and debounced input
- FacetIndex / FacetSelection: tag and topic listings and filters
"""

from .errors import ContentDiscoveryError, ContentIndexError, SlugCollisionError
from .stopwords import StopwordSet, normalize_token
from .hashtag import KeywordExtractor, extract_hashtags
from .frontmatter import (
    FrontmatterValue,
    ParsedSource,
    SourceFormat,
    ValueKind,
    parse_frontmatter_block,
    parse_jsx,
    parse_markdown,
    parse_source,
    strip_formatting,
)
from .post import Post, RenderSource, derive_slug
from .file_scanner import ContentFile, FileScanner
from .indexer import ContentIndexer
from .facets import FacetIndex, FacetKind, FacetSelection, filter_posts, paginate
from .debounce import Debouncer
from .search_engine import (
    SearchEngine,
    SearchQuery,
    SearchResult,
    SearchSession,
    build_snippet,
)

__all__ = [
    "ContentDiscoveryError",
    "ContentIndexError",
    "SlugCollisionError",
    "StopwordSet",
    "normalize_token",
    "KeywordExtractor",
    "extract_hashtags",
    "FrontmatterValue",
    "ParsedSource",
    "SourceFormat",
    "ValueKind",
    "parse_frontmatter_block",
    "parse_jsx",
    "parse_markdown",
    "parse_source",
    "strip_formatting",
    "Post",
    "RenderSource",
    "derive_slug",
    "ContentFile",
    "FileScanner",
    "ContentIndexer",
    "FacetIndex",
    "FacetKind",
    "FacetSelection",
    "filter_posts",
    "paginate",
    "Debouncer",
    "SearchEngine",
    "SearchQuery",
    "SearchResult",
    "SearchSession",
    "build_snippet",
]
