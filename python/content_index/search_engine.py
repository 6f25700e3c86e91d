import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from rapidfuzz import fuzz, utils

from colored_logger import get_colored_logger
from .debounce import DEFAULT_WAIT_SECONDS, Debouncer
from .facets import FacetKind, FacetSelection
from .post import Post

logger = get_colored_logger(__name__)

DEFAULT_THRESHOLD = 0.35
DEFAULT_KEYS = ("title", "excerpt", "body", "tags", "topics")
NEUTRAL_SCORE = 1.0

SNIPPET_CONTEXT = 60
SNIPPET_FALLBACK_LENGTH = 160
ELLIPSIS = "…"


@dataclass
class SearchQuery:
    """
    Free-text query plus facet filters.

    Every active tag and every active topic must be present on a result.
    """

    text: str = ""
    tags: Set[str] = field(default_factory=set)
    topics: Set[str] = field(default_factory=set)
    limit: Optional[int] = None

    def __post_init__(self):
        self.text = (self.text or "").strip()
        self.tags = set(self.tags or ())
        self.topics = set(self.topics or ())

    @property
    def selection(self) -> FacetSelection:
        return FacetSelection(tags=set(self.tags), topics=set(self.topics))


@dataclass
class SearchResult:
    """
    A matched post with its fuzzy score (0 = exact, lower is better).
    """

    post: Post
    score: float
    snippet: str = ""

    @property
    def relevance(self) -> float:
        """Score flipped for display: 1 = best match."""
        return 1.0 - self.score


def build_snippet(body: str, query: str) -> str:
    """
    Cut a short excerpt of `body` around the first occurrence of `query`.

    Without a match (or without a query) the first 160 characters are used.
    A leading ellipsis marks a window that does not start at the beginning.
    """
    if not body:
        return ""

    index = body.lower().find(query.lower()) if query else -1
    if index == -1:
        start = 0
        end = min(len(body), SNIPPET_FALLBACK_LENGTH)
    else:
        start = max(0, index - SNIPPET_CONTEXT)
        end = min(len(body), index + len(query) + SNIPPET_CONTEXT)

    snippet = body[start:end].strip()
    return f"{ELLIPSIS}{snippet}" if start > 0 else snippet


def _field_values(post: Post, key: str) -> Iterable[str]:
    value = getattr(post, key, None)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


class SearchEngine:
    """
    Fuzzy full-text search over an immutable Post snapshot.

    Matching is location independent: a term anywhere in a field counts the
    same. The index (pre-processed field text) is built once per snapshot;
    queries never mutate it, so concurrent searches are safe.

    Features:
    - Fuzzy matching across title, excerpt, body, tags and topics
    - Conjunctive tag/topic facet filtering after matching
    - Result snippets around the first literal match
    """

    def __init__(
        self,
        posts: Sequence[Post],
        threshold: float = DEFAULT_THRESHOLD,
        keys: Sequence[str] = DEFAULT_KEYS,
        scorer: Optional[Callable[[str, str], float]] = None,
    ):
        """
        Initialize the search engine.

        Args:
            posts: Post collection (copied; later changes to the caller's
                list are not seen)
            threshold: Maximum score for a match, 0 = exact, 1 = anything
            keys: Post attributes to search
            scorer: Optional (query, text) -> score function, already
                normalized to 0..1 with 0 = exact
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")

        self.posts: Tuple[Post, ...] = tuple(posts)
        self.threshold = threshold
        self.keys = tuple(keys)
        self.scorer = scorer or self._fuzzy_score
        self._index = [self._index_post(post) for post in self.posts]
        logger.debug(
            "Search index built over %d posts (keys: %s)",
            len(self.posts),
            ", ".join(self.keys),
        )

    @classmethod
    def from_indexer(cls, indexer, threshold: float = DEFAULT_THRESHOLD) -> "SearchEngine":
        return cls(indexer.get_all_posts(), threshold=threshold)

    def search(self, query: SearchQuery) -> List[SearchResult]:
        """
        Perform a search with the given query parameters.

        An empty query returns every post in collection order with the
        neutral score. Facet filters apply in both cases.

        Returns:
            List of SearchResult objects, best match first
        """
        selection = query.selection

        if not query.text:
            results = [
                SearchResult(post, NEUTRAL_SCORE, build_snippet(post.body, ""))
                for post in self.posts
            ]
        else:
            results = self._match(query.text)

        if not selection.is_empty:
            results = [r for r in results if selection.matches(r.post)]

        if query.limit is not None:
            results = results[: max(query.limit, 0)]

        logger.debug("Search %r returned %d results", query.text, len(results))
        return results

    def search_simple(
        self,
        text: str,
        tags: Iterable[str] = (),
        topics: Iterable[str] = (),
        limit: Optional[int] = None,
    ) -> List[SearchResult]:
        """Convenience wrapper building the SearchQuery."""
        return self.search(
            SearchQuery(text=text, tags=set(tags), topics=set(topics), limit=limit)
        )

    def score_post(self, text: str, position: int) -> float:
        """Best (lowest) field score of the post at `position` for `text`."""
        return self._score(utils.default_process(text), position)

    def _score(self, processed_query: str, position: int) -> float:
        best = NEUTRAL_SCORE
        for values in self._index[position].values():
            for value in values:
                best = min(best, self.scorer(processed_query, value))
                if best == 0.0:
                    return best
        return best

    def _match(self, text: str) -> List[SearchResult]:
        processed_query = utils.default_process(text)
        scored = []
        for position, post in enumerate(self.posts):
            score = self._score(processed_query, position)
            if score <= self.threshold:
                scored.append((score, position, post))

        # Position breaks ties so equal scores keep collection order
        scored.sort(key=lambda item: (item[0], item[1]))
        return [
            SearchResult(post, score, build_snippet(post.body, text))
            for score, _, post in scored
        ]

    def _index_post(self, post: Post) -> Dict[str, Tuple[str, ...]]:
        entry = {}
        for key in self.keys:
            processed = tuple(
                utils.default_process(value) for value in _field_values(post, key)
            )
            entry[key] = tuple(value for value in processed if value)
        return entry

    @staticmethod
    def _fuzzy_score(query: str, text: str) -> float:
        if not query or not text:
            return NEUTRAL_SCORE
        # Look for the query inside the field, never the field inside the query
        if len(query) <= len(text):
            ratio = fuzz.partial_ratio(query, text)
        else:
            ratio = fuzz.ratio(query, text)
        return 1.0 - ratio / 100.0


class SearchSession:
    """
    Interactive search state: current query text, active facets and a
    debouncer so only the last query typed within the settle interval runs.
    """

    def __init__(
        self,
        engine: SearchEngine,
        on_results: Optional[Callable[[List[SearchResult]], None]] = None,
        wait_seconds: float = DEFAULT_WAIT_SECONDS,
        timer_factory=None,
    ):
        self.engine = engine
        self.on_results = on_results
        self.selection = FacetSelection()
        self._lock = threading.RLock()
        self.text = ""
        self.results: List[SearchResult] = engine.search(SearchQuery())

        debouncer_kwargs = {"wait_seconds": wait_seconds}
        if timer_factory is not None:
            debouncer_kwargs["timer_factory"] = timer_factory
        self._debouncer = Debouncer(self._run, **debouncer_kwargs)

    @classmethod
    def from_settings(
        cls,
        engine: SearchEngine,
        settings,
        on_results: Optional[Callable[[List[SearchResult]], None]] = None,
        timer_factory=None,
    ) -> "SearchSession":
        """Create a session using the configured debounce interval."""
        return cls(
            engine,
            on_results=on_results,
            wait_seconds=settings.debounce_ms / 1000.0,
            timer_factory=timer_factory,
        )

    def submit(self, text: str) -> None:
        """Queue a query; it runs once input settles."""
        self._debouncer.call(text.strip())

    def flush(self) -> bool:
        """Run the pending query immediately."""
        return self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()

    def toggle(self, value: str, kind: FacetKind = FacetKind.TAG) -> List[SearchResult]:
        """Toggle a facet filter and re-run the current query right away."""
        with self._lock:
            self.selection.toggle(value, kind)
            return self._run(self.text)

    def clear_filters(self) -> List[SearchResult]:
        with self._lock:
            self.selection.clear()
            return self._run(self.text)

    def _run(self, text: str) -> List[SearchResult]:
        # Runs on the timer thread for settled input and on the caller's
        # thread for toggles; one search at a time
        with self._lock:
            self.text = text
            self.results = self.engine.search(
                SearchQuery(
                    text=text,
                    tags=set(self.selection.tags),
                    topics=set(self.selection.topics),
                )
            )
            if self.on_results is not None:
                self.on_results(self.results)
            return self.results
