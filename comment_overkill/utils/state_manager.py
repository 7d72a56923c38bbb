"""
Progress cursor persistence for resumable runs.
"""
import json
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, cast

from comment_overkill.models import RunState
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

CURSOR_FIELDS = ["running", "partition_index", "preserve_window_seconds"]


def write_json_atomic(path: Path, data: Dict[str, Any]) -> None:
    """
    Write JSON to a temp file and rename it over the target.

    Args:
        path: Destination file
        data: JSON-serializable dictionary
    """
    if path.exists():
        backup_path = path.with_suffix(".json.bak")
        shutil.copy2(path, backup_path)
        logger.debug(f"Created backup: {backup_path}")

    temp_path = path.with_suffix(".json.tmp")
    with open(temp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    # Atomic rename
    temp_path.replace(path)


def read_json(path: Path) -> Optional[Dict[str, Any]]:
    """
    Read a JSON object from disk.

    Returns:
        Dictionary, or None if the file is missing, corrupted or not an object
    """
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Corrupted JSON in {path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Unexpected JSON structure in {path}")
        return None

    return cast(Dict[str, Any], data)


class StateManager:
    """Persists the run cursor so an interrupted run can be resumed."""

    def __init__(self, progress_path: Path, default_partitions: Optional[Sequence[str]] = None):
        """
        Initialize StateManager.

        Args:
            progress_path: Path to progress JSON file
            default_partitions: Partitions assumed when a cursor does not list them
        """
        self.progress_path = progress_path
        self.default_partitions = list(default_partitions) if default_partitions else None

        # Ensure directory exists
        self.progress_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"StateManager initialized with path: {self.progress_path}")

    def save_state(self, state: RunState) -> None:
        """
        Save the run cursor.

        Args:
            state: RunState to persist
        """
        cursor = state.to_cursor()
        cursor["last_updated"] = datetime.now().isoformat()

        try:
            write_json_atomic(self.progress_path, cursor)
            logger.debug(
                f"State saved to {self.progress_path} "
                f"(partition={cursor['partition']}, index={cursor['partition_index']})"
            )
        except Exception as e:
            logger.error(f"Failed to save state: {e}")
            # Don't raise - state save failure shouldn't stop the operation

    def load_cursor(self) -> Optional[Dict[str, Any]]:
        """
        Load the raw cursor dictionary.

        Returns:
            Cursor dictionary or None if missing or invalid
        """
        cursor = read_json(self.progress_path)
        if cursor is None:
            logger.debug("No progress cursor found")
            return None

        if not self._validate_cursor(cursor):
            logger.warning("Invalid cursor structure, ignoring saved progress")
            return None

        return cursor

    def load_state(self) -> Optional[RunState]:
        """
        Load the run cursor.

        Returns:
            RunState or None if no usable cursor exists
        """
        cursor = self.load_cursor()
        if cursor is None:
            return None

        try:
            state = RunState.from_cursor(cursor, default_partitions=self.default_partitions)
        except ValueError as e:
            logger.warning(f"Could not decode progress cursor: {e}")
            return None

        logger.debug(f"State loaded from {self.progress_path}")
        return state

    def clear_state(self) -> None:
        """Clear progress state (delete file)."""
        try:
            if self.progress_path.exists():
                self.progress_path.unlink()
                logger.info("Progress state cleared")

            backup_path = self.progress_path.with_suffix(".json.bak")
            if backup_path.exists():
                backup_path.unlink()

        except Exception as e:
            logger.error(f"Failed to clear state: {e}")

    def _validate_cursor(self, cursor: Dict[str, Any]) -> bool:
        """
        Validate cursor structure.

        Args:
            cursor: Cursor dictionary to validate

        Returns:
            True if all required fields are present, False otherwise
        """
        missing = [name for name in CURSOR_FIELDS if name not in cursor]
        if missing:
            logger.debug(f"Cursor missing fields: {missing}")
            return False
        return True


class RateLimitStore:
    """Persists the governor's backoff state across restarts."""

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def save(self, snapshot: Dict[str, Any]) -> None:
        try:
            write_json_atomic(self.path, snapshot)
            logger.debug(f"Rate limit state saved to {self.path}")
        except Exception as e:
            logger.error(f"Failed to save rate limit state: {e}")

    def load(self) -> Optional[Dict[str, Any]]:
        return read_json(self.path)
