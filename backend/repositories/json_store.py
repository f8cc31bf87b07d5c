"""
Computer store persisted as a JSON file.

All lookups and mutations are delegated to an in-memory working set. After
every successful mutation the whole working set is written back to the file.
A failed rewrite raises StoreWriteError but leaves the in-memory change in
place, so the file may lag behind memory until the next successful write.
"""
import logging
from typing import List

from domain.errors import StoreError, StoreReadError
from domain.models import Computer
from repositories.base import ComputerStore, KeyArg
from repositories.volatile import VolatileComputerStore
from storage.file_storage import JsonFileStorage

logger = logging.getLogger(__name__)


class JsonComputerStore(ComputerStore):
    def __init__(self, path: str):
        self.path = path
        self._memory = VolatileComputerStore()
        self._storage = JsonFileStorage(path)
        self._storage.open()
        try:
            self._replay(self._storage.load())
        except Exception:
            self._storage.close()
            raise

    def _replay(self, records: List[dict]) -> None:
        for record in records:
            try:
                self._memory.add(Computer.from_dict(record))
            except StoreError as exc:
                logger.error("Error updating internal database from %s: %s", self.path, exc)
                raise StoreReadError(f"Invalid record in {self.path}: {exc}") from exc
        logger.info("Loaded %d computers from %s", len(self._memory), self.path)

    def _write(self) -> None:
        self._storage.write([c.to_dict() for c in self._memory.snapshot()])

    def read(self, key: KeyArg, value: str) -> Computer:
        return self._memory.read(key, value)

    def read_all(self, key: KeyArg, value: str = "") -> List[Computer]:
        return self._memory.read_all(key, value)

    def add(self, computer: Computer) -> None:
        self._memory.add(computer)
        self._write()

    def delete(self, key: KeyArg, value: str) -> None:
        self._memory.delete(key, value)
        self._write()

    def assign(self, key: KeyArg, value: str, assignee: str) -> None:
        self._memory.assign(key, value, assignee)
        self._write()

    def close(self) -> None:
        self._storage.close()
