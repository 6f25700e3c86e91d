from typing import Dict, List


class ContentIndexError(Exception):
    """Base class for content index errors."""

    pass


class ContentDiscoveryError(ContentIndexError):
    """Raised when the content root is missing or cannot be read."""

    pass


class SlugCollisionError(ContentIndexError):
    """Raised when distinct source files derive the same slug."""

    def __init__(self, collisions: Dict[str, List[str]]):
        self.collisions = collisions
        details = "; ".join(
            f"{slug}: {', '.join(paths)}" for slug, paths in sorted(collisions.items())
        )
        super().__init__(f"Slug collision(s) detected: {details}")
