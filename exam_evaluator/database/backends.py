"""
Key-value storage backends for the result store.

Both backends expose the same three calls as browser local storage:
``get_item``, ``set_item`` and ``remove_item``. Values are opaque strings.
"""
import os
import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional

from exam_evaluator.exceptions import StorageError

logger = logging.getLogger(__name__)


class InMemoryStorage:
    """Dictionary-backed storage, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a reader sees either the old blob or the new one.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        file_path = self._path_for(key)
        if not file_path.exists():
            return None
        try:
            return file_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Error reading {file_path}: {str(e)}")
            raise StorageError(f"Could not read {file_path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        file_path = self._path_for(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, file_path)
        except OSError as e:
            logger.error(f"Error writing {file_path}: {str(e)}")
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise StorageError(f"Could not write {file_path}: {e}") from e

    def remove_item(self, key: str) -> None:
        file_path = self._path_for(key)
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Error removing {file_path}: {str(e)}")
            raise StorageError(f"Could not remove {file_path}: {e}") from e
