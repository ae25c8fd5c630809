"""Best-effort local persistence of session progress."""
import logging
from pathlib import Path

from pydantic import ValidationError

from quiz_api.errors import PersistenceError
from quiz_api.models.progress import ProgressSnapshot
from quiz_api.utils import read_json_file, write_json_file

logger = logging.getLogger(__name__)


class ProgressStore:
    """
    Stores one progress snapshot as ``<directory>/<key>.json``.

    Public operations never raise. Failures are logged and reported through
    the return value so callers may ignore them and continue in memory.
    """

    def __init__(self, directory: Path, key: str):
        self.directory = directory
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def _write(self, snapshot: ProgressSnapshot) -> None:
        try:
            write_json_file(self.path, snapshot.model_dump(mode="json"))
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

    def _read(self) -> ProgressSnapshot | None:
        try:
            raw = read_json_file(self.path, None)
        except OSError as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"Unparseable progress in {self.path}: {e}") from e
        if raw is None:
            return None
        try:
            return ProgressSnapshot.model_validate(raw)
        except ValidationError as e:
            raise PersistenceError(f"Invalid progress in {self.path}: {e}") from e

    def save(self, snapshot: ProgressSnapshot) -> bool:
        """Overwrite the stored snapshot. Returns False on failure."""
        try:
            self._write(snapshot)
        except PersistenceError as e:
            logger.error(f"Failed to save progress: {e}")
            return False
        return True

    def load(self) -> ProgressSnapshot | None:
        """Stored snapshot, or None if absent or unreadable."""
        try:
            return self._read()
        except PersistenceError as e:
            logger.warning(f"Ignoring saved progress: {e}")
            return None

    def clear(self) -> bool:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to clear progress {self.path}: {e}")
            return False
        return True
