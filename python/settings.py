import json
import os
from typing import Any, List, Optional

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

DEFAULT_SETTINGS_FILE = "settings.json"
DEFAULT_STATIC_ROUTES = ["/", "/blog", "/tags", "/search"]
DEFAULT_SITE_URL = "https://example.com"


def load_env_file(env_path: str) -> bool:
    """
    Minimal .env parser. Loads key=value pairs into os.environ without
    overriding variables that are already set.

    Returns:
        True if the file existed and was read
    """
    if not os.path.isfile(env_path):
        return False

    try:
        with open(env_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()

                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                    value = value[1:-1]

                if key and key not in os.environ:
                    os.environ[key] = value

        logger.debug(".env file loaded from %s", env_path)
        return True

    except (IOError, OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to load .env file %s: %s", env_path, e)
        return False


class Settings:
    """
    Blog index configuration loaded from a JSON file (by default `settings.json`).

    A missing or invalid file never aborts the caller: the interactive
    index runs inside a larger process, so every setting falls back to
    its default and the problem is logged.
    """

    def __init__(
        self, settings_file: Optional[str] = DEFAULT_SETTINGS_FILE, env_file: str = ".env"
    ) -> None:
        """
        :param settings_file: Path to the JSON settings file. None skips file loading.
        :param env_file: Path to an optional .env file providing SITE_URL.
        """
        load_env_file(env_file)

        self.settings_file = settings_file
        self.raw = {}
        if settings_file:
            if os.path.isfile(settings_file):
                loaded = self._load_json(settings_file)
                if isinstance(loaded, dict):
                    self.raw = loaded
                    logger.info("Settings loaded from '%s'.", settings_file)
                else:
                    logger.error(
                        "Settings file '%s' is empty or invalid, using defaults.",
                        settings_file,
                    )
            else:
                logger.warning(
                    "Settings file '%s' not found, using defaults.", settings_file
                )

        # Content discovery
        self.content_root: str = self.raw.get("content_root", "content/blog")
        self.output_dir: str = self.raw.get("output_dir", "dist")

        # Site metadata used by the feed generator
        self.site_url: str = (
            os.environ.get("SITE_URL") or self.raw.get("site_url") or DEFAULT_SITE_URL
        ).rstrip("/")
        self.site_title: str = self.raw.get("site_title", "React Lern-Blog")
        self.site_description: str = self.raw.get(
            "site_description", "Kommentiertes Lernprojekt für React & Vite"
        )
        self.static_routes: List[str] = self._get_list(
            "static_routes", DEFAULT_STATIC_ROUTES
        )

        # Indexing
        self.max_hashtags: int = self._get_int("max_hashtags", 5, minimum=0)
        self.stopwords_file: Optional[str] = self.raw.get("stopwords_file") or None
        self.strict_slugs: bool = bool(self.raw.get("strict_slugs", False))

        # Search
        self.search_threshold: float = self._get_float("search_threshold", 0.35)
        self.debounce_ms: int = self._get_int("debounce_ms", 250, minimum=0)
        self.page_size: int = self._get_int("page_size", 6, minimum=1)

    def _load_json(self, path: str) -> Any:
        """
        Loads JSON from the given file path.

        :return: The parsed JSON if valid, otherwise None.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError, OSError) as e:
            logger.error("Error loading JSON file '%s': %s", path, e)
            return None

    def _get_int(self, key: str, default: int, minimum: int = None) -> int:
        value = self.raw.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning("Invalid value for %s: %r, using %d", key, value, default)
            return default
        if minimum is not None and value < minimum:
            logger.warning("%s must be >= %d, using %d", key, minimum, default)
            return default
        return value

    def _get_float(self, key: str, default: float) -> float:
        value = self.raw.get(key, default)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("Invalid value for %s: %r, using %s", key, value, default)
            return default
        if not 0.0 <= value <= 1.0:
            logger.warning("%s must be between 0 and 1, using %s", key, default)
            return default
        return float(value)

    def _get_list(self, key: str, default: List[str]) -> List[str]:
        value = self.raw.get(key, default)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            logger.warning("Invalid value for %s: %r, using defaults", key, value)
            return list(default)
        return list(value)
