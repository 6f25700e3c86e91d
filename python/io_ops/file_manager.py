import os
from pathlib import Path
from typing import Union

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)


class FileManager:
    @staticmethod
    def ensure_dir_exists(directory: Path) -> None:
        directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def write_to_file(file_path: Path, content: str) -> None:
        """Write text atomically: temp file next to the target, then rename."""
        FileManager.ensure_dir_exists(file_path.parent)
        temp_path = file_path.with_name(f"{file_path.name}.tmp.{os.getpid()}")
        try:
            with temp_path.open("w", encoding="utf-8") as f:
                f.write(content)
            os.replace(temp_path, file_path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
        logger.debug("Wrote %d characters to %s", len(content), file_path)

    @staticmethod
    def resolve_output_dir(location: Union[str, Path]) -> Path:
        """Expand ~ and make relative locations relative to the working directory."""
        expanded = Path(os.path.expanduser(str(location))) if location else Path("dist")
        if not expanded.is_absolute():
            expanded = Path.cwd() / expanded
        return expanded
