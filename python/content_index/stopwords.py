import unicodedata
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

DEFAULT_STOPWORDS_PATH = Path(__file__).parent / "data" / "stopwords.de.txt"


def normalize_token(value: str) -> str:
    """
    Lowercase a token and fold accented characters to their base letter.

    "Wärmt" -> "warmt", "Straße" -> "strasse".
    """
    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.replace("ß", "ss")


class StopwordSet:
    """
    Immutable set of stopwords, stored in normalized form.

    Built once by whoever owns the indexer and handed to the keyword
    extractor, instead of living in a module-level global.
    """

    def __init__(self, words: Iterable[str] = ()):
        self._words: FrozenSet[str] = frozenset(
            normalize_token(word.strip()) for word in words if word and word.strip()
        )

    @classmethod
    def from_text(cls, text: str) -> "StopwordSet":
        """Parse one word per line; blank lines and # comments are ignored."""
        words = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            words.append(line)
        return cls(words)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StopwordSet":
        with open(path, "r", encoding="utf-8") as f:
            stopwords = cls.from_text(f.read())
        logger.debug("Loaded %d stopwords from %s", len(stopwords), path)
        return stopwords

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "StopwordSet":
        """
        Load a stopword file, falling back to the bundled German list.

        A configured file that cannot be read is logged and replaced by
        the bundled list.
        """
        if path:
            try:
                return cls.from_file(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(
                    "Could not read stopword file %s (%s), using bundled list", path, e
                )
        return cls.from_file(DEFAULT_STOPWORDS_PATH)

    def __contains__(self, token: str) -> bool:
        return token in self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self):
        return iter(self._words)
