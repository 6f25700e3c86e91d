"""
Content discovery for the blog index.

Walks the content root and returns every file whose extension maps to a
known source format, together with its path relative to the root.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from colored_logger import get_colored_logger
from .errors import ContentDiscoveryError
from .frontmatter import EXTENSION_FORMATS, SourceFormat

logger = get_colored_logger(__name__)


@dataclass(frozen=True)
class ContentFile:
    """A discovered content source."""

    path: Path
    relative_path: str
    fmt: SourceFormat


class FileStats:
    """Container for discovery statistics."""

    def __init__(self):
        self.total_files = 0
        self.total_size = 0
        self.skipped_files = 0
        self.error_files = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_size": self.total_size,
            "skipped_files": self.skipped_files,
            "error_files": self.error_files,
        }

    def add_file(self, file_size: int) -> None:
        self.total_files += 1
        self.total_size += file_size

    def skip_file(self) -> None:
        self.skipped_files += 1

    def error_file(self) -> None:
        self.error_files += 1


class FileScanner:
    """Finds content sources below a root directory."""

    def __init__(self, extensions: Optional[Iterable[str]] = None):
        if extensions is None:
            extensions = EXTENSION_FORMATS.keys()
        self.extensions = {ext.lower() for ext in extensions}
        self.stats = FileStats()

    def discover(
        self, content_root: Union[str, Path], strict: bool = False
    ) -> List[ContentFile]:
        """
        Return all content files under `content_root`, sorted by relative path.

        Args:
            content_root: Directory to scan recursively
            strict: Raise ContentDiscoveryError when the root is missing or
                unreadable instead of returning an empty list

        Returns:
            List of ContentFile entries
        """
        self.stats = FileStats()
        root = Path(content_root)

        if not root.exists():
            return self._fail(strict, f"Content root not found: {content_root}")
        if not root.is_dir():
            return self._fail(strict, f"Content root is not a directory: {content_root}")

        try:
            with os.scandir(root):
                pass
        except OSError as e:
            return self._fail(strict, f"Cannot read content root {content_root}: {e}")

        candidates = sorted(
            Path(dirpath) / name
            for dirpath, _, filenames in os.walk(root, onerror=self._walk_error)
            for name in filenames
            if (Path(dirpath) / name).is_file()
        )

        files = []
        for file_path in candidates:
            content_file = self._inspect(file_path, root)
            if content_file is not None:
                files.append(content_file)

        logger.debug(
            "Discovered %d content files under %s (%d skipped)",
            len(files),
            root,
            self.stats.skipped_files,
        )
        return files

    def _inspect(self, file_path: Path, root: Path) -> Optional[ContentFile]:
        suffix = file_path.suffix.lower()
        if suffix not in self.extensions or suffix not in EXTENSION_FORMATS:
            self.stats.skip_file()
            return None

        try:
            size = file_path.stat().st_size
        except OSError as e:
            logger.warning("Cannot stat content file %s: %s", file_path, e)
            self.stats.error_file()
            return None

        self.stats.add_file(size)
        return ContentFile(
            path=file_path,
            relative_path=file_path.relative_to(root).as_posix(),
            fmt=EXTENSION_FORMATS[suffix],
        )

    def _fail(self, strict: bool, message: str) -> List[ContentFile]:
        if strict:
            raise ContentDiscoveryError(message)
        logger.warning("%s - continuing with an empty index", message)
        return []

    def _walk_error(self, error: OSError) -> None:
        self.stats.error_file()
        logger.warning("Skipping unreadable directory %s: %s", error.filename, error)
