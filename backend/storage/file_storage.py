"""
File storage abstraction.

Owns the single open handle of a JSON inventory file. The file always holds a
JSON array of computer objects and is rewritten in full, never appended to.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from domain.errors import (
    StoreCloseError,
    StoreCreateError,
    StoreOpenError,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = "[]"


class JsonFileStorage:
    """
    Local JSON file holding a list of records.

    A missing file is created empty on open; an existing one is kept open
    read/write for the lifetime of the storage.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._file: Optional[TextIO] = None
        self._created = False

    def open(self) -> None:
        if not self.path.exists():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._file = open(self.path, "w+", encoding="utf-8")
                # A new store file is readable as an empty list straight away
                self._file.write(EMPTY_DOCUMENT)
                self._file.flush()
            except OSError as exc:
                logger.error("Error creating file %s: %s", self.path, exc)
                raise StoreCreateError(f"Error creating file {self.path}") from exc
            self._created = True
            logger.info("Created empty inventory file %s", self.path)
            return

        try:
            self._file = open(self.path, "r+", encoding="utf-8")
        except OSError as exc:
            logger.error("Error opening file %s: %s", self.path, exc)
            raise StoreOpenError(f"Error opening file {self.path}") from exc

    def load(self) -> List[Dict[str, Any]]:
        """
        Parse the whole file as a JSON array.

        A freshly created file has no records. Anything other than an array of
        objects is a read error.
        """
        handle = self._require_open()
        if self._created:
            return []
        try:
            handle.seek(0)
            payload = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.error("Error decoding JSON in %s: %s", self.path, exc)
            raise StoreReadError(f"Error decoding JSON in {self.path}") from exc

        if not isinstance(payload, list) or not all(isinstance(i, dict) for i in payload):
            logger.error("Error decoding JSON in %s: expected an array of objects", self.path)
            raise StoreReadError(f"{self.path} does not hold an array of objects")
        return payload

    def write(self, records: List[Dict[str, Any]]) -> None:
        """Truncate the file and write `records` from the start."""
        handle = self._require_open()
        try:
            handle.seek(0)
            handle.truncate()
            if records:
                json.dump(records, handle)
            else:
                handle.write(EMPTY_DOCUMENT)
            handle.flush()
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error writing JSON file %s: %s", self.path, exc)
            raise StoreWriteError(f"Error writing JSON file {self.path}") from exc

    def close(self) -> None:
        if self._file is None:
            return
        handle, self._file = self._file, None
        try:
            handle.close()
        except OSError as exc:
            logger.error("Error closing file %s: %s", self.path, exc)
            raise StoreCloseError(f"Error closing file {self.path}") from exc

    def _require_open(self) -> TextIO:
        if self._file is None:
            raise StoreOpenError(f"{self.path} is not open")
        return self._file
