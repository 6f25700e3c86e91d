"""
Keyword extraction for auto-generated hashtags.

Text is split on whitespace and punctuation, normalized (lowercase, no
diacritics, ß -> ss), filtered against a stopword set and ranked by
frequency. Ties keep first-occurrence order.
"""

import re
from typing import Dict, List, Optional

from .stopwords import StopwordSet, normalize_token

DEFAULT_MAX_TAGS = 5
MIN_TOKEN_LENGTH = 3

# Whitespace, ASCII punctuation and typographic quotes
_DELIMITERS = re.compile(r"[\s,.;:!?()\[\]{}\"«»„”“›‹]+")
_EMPHASIS_CHARS = re.compile(r"[#*`]")
_NUMERIC = re.compile(r"^\d+$")


class KeywordExtractor:
    """Ranks the meaningful tokens of a text by frequency."""

    def __init__(self, stopwords: StopwordSet, min_length: int = MIN_TOKEN_LENGTH):
        self.stopwords = stopwords
        self.min_length = min_length

    def tokenize(self, text: str) -> List[str]:
        """Split and normalize text; returns meaningful tokens in order."""
        if not text or not isinstance(text, str):
            return []

        tokens = []
        for raw in _DELIMITERS.split(text):
            token = normalize_token(_EMPHASIS_CHARS.sub("", raw))
            if self.is_meaningful(token):
                tokens.append(token)
        return tokens

    def is_meaningful(self, token: str) -> bool:
        if not token or len(token) < self.min_length:
            return False
        if token in self.stopwords:
            return False
        if _NUMERIC.match(token):
            return False
        return True

    def frequencies(self, text: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for token in self.tokenize(text):
            counts[token] = counts.get(token, 0) + 1
        return counts

    def extract(self, text: str, max_tags: int = DEFAULT_MAX_TAGS) -> List[str]:
        """
        Return up to `max_tags` keywords, most frequent first.

        Args:
            text: Plain text, typically the stripped post body
            max_tags: Maximum number of keywords

        Returns:
            List of keyword strings without a leading '#'
        """
        if max_tags <= 0:
            return []

        counts = self.frequencies(text)
        # sorted() is stable, so equal counts keep first-occurrence order
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [token for token, _ in ranked[:max_tags]]


def extract_hashtags(
    text: str,
    max_tags: int = DEFAULT_MAX_TAGS,
    stopwords: Optional[StopwordSet] = None,
) -> List[str]:
    """
    Convenience wrapper around KeywordExtractor.

    Uses the bundled stopword list when none is given.
    """
    if stopwords is None:
        stopwords = StopwordSet.load()
    return KeywordExtractor(stopwords).extract(text, max_tags)
