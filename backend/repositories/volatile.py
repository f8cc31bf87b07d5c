"""
In-memory computer store.

Reads are linear scans over a plain list; there is no secondary index.
Deleting swaps the matched computer with the last one and truncates, so the
iteration order is not preserved across deletes.
"""
import copy
import logging
from typing import List, Optional

from domain.errors import AlreadyExistsError, NotFoundError, NotUniqueError
from domain.models import Computer, KeyKind
from repositories.base import (
    ComputerStore,
    KeyArg,
    require_identifying_key,
    require_multi_read_key,
    validate_assignee,
    validate_computer,
)

logger = logging.getLogger(__name__)


class VolatileComputerStore(ComputerStore):
    """Computers held in process memory; lost on exit."""

    def __init__(self) -> None:
        self._data: List[Computer] = []

    def __len__(self) -> int:
        return len(self._data)

    def snapshot(self) -> List[Computer]:
        """Copies of every computer in current storage order, possibly empty."""
        return [copy.copy(c) for c in self._data]

    def _find_index(self, key: KeyKind, value: str, action: str) -> int:
        found: Optional[int] = None
        for n, computer in enumerate(self._data):
            if computer.matches(key, value):
                if found is not None:
                    logger.warning(
                        "Error %s item with %s=%s: Multiple items found", action, key.value, value
                    )
                    raise NotUniqueError(f"{key.value}={value} matches more than one item")
                found = n
        if found is None:
            logger.warning("Error %s item with %s=%s: Item not found", action, key.value, value)
            raise NotFoundError(f"No item with {key.value}={value}")
        return found

    def read(self, key: KeyArg, value: str) -> Computer:
        kind = require_identifying_key(key, "fetching")
        index = self._find_index(kind, value, "fetching")
        # Callers must not be able to mutate stored records through the result
        return copy.copy(self._data[index])

    def read_all(self, key: KeyArg, value: str = "") -> List[Computer]:
        kind = require_multi_read_key(key)
        if kind == KeyKind.ASSIGNEE:
            selected = [c for c in self._data if c.assignee == value]
        elif kind == KeyKind.NOT_ASSIGNED:
            selected = [c for c in self._data if c.assignee == ""]
        else:
            selected = list(self._data)

        if not selected:
            logger.warning("Error fetching items with %s=%s: No items found", kind.value, value)
            raise NotFoundError(f"No items with {kind.value}={value}")
        return [copy.copy(c) for c in selected]

    def add(self, computer: Computer) -> None:
        validate_computer(computer)
        for existing in self._data:
            if computer.collides_with(existing):
                logger.warning("Error adding item: Item %s already exists", computer.mac)
                raise AlreadyExistsError("Item already exists")
        self._data.append(copy.copy(computer))

    def delete(self, key: KeyArg, value: str) -> None:
        kind = require_identifying_key(key, "deleting")
        index = self._find_index(kind, value, "deleting")
        self._data[index] = self._data[-1]
        self._data.pop()

    def assign(self, key: KeyArg, value: str, assignee: str) -> None:
        validate_assignee(assignee)
        kind = require_identifying_key(key, "assigning")
        index = self._find_index(kind, value, "assigning")
        self._data[index].assignee = assignee

    def close(self) -> None:
        return None
