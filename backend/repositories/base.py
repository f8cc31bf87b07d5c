"""
Store contract shared by the volatile, JSON-file and SQLite backends.

Every backend must give identical answers for the same sequence of calls;
only the persistence strategy differs.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Union

from domain.errors import InvalidKeyKindError, MalformedError
from domain.models import (
    Computer,
    IDENTIFYING_KEYS,
    KeyKind,
    MULTI_READ_KEYS,
    is_valid_assignee,
    parse_key_kind,
)

logger = logging.getLogger(__name__)

KeyArg = Union[str, KeyKind]


def require_identifying_key(key: KeyArg, action: str) -> KeyKind:
    """Resolve `key` and reject anything but MAC, Name or IP."""
    kind = parse_key_kind(key)
    if kind not in IDENTIFYING_KEYS:
        logger.warning("Error %s item: Invalid key type %s", action, kind.value)
        raise InvalidKeyKindError(f"Invalid key type {kind.value} for this operation")
    return kind


def require_multi_read_key(key: KeyArg) -> KeyKind:
    """Resolve `key` and reject the identifying attributes."""
    kind = parse_key_kind(key)
    if kind not in MULTI_READ_KEYS:
        logger.warning("Error fetching items: Invalid key type %s", kind.value)
        raise InvalidKeyKindError(f"Invalid key type {kind.value} for this operation")
    return kind


def validate_computer(computer: Computer) -> None:
    if not computer.mac or not computer.name or not computer.ip:
        logger.warning("Error adding item: MAC, Name and IP are mandatory fields")
        raise MalformedError("MAC, Name and IP are mandatory fields")
    validate_assignee(computer.assignee)


def validate_assignee(assignee: str) -> None:
    if not is_valid_assignee(assignee):
        logger.warning("Assignee code %r must be exactly three characters long", assignee)
        raise MalformedError("Assignee code must be exactly three characters long")


class ComputerStore(ABC):
    """
    Abstract computer store.

    All methods are synchronous and not thread-safe; callers serialize access
    (see services.inventory.InventoryService).
    """

    @abstractmethod
    def read(self, key: KeyArg, value: str) -> Computer:
        """Return the single computer whose identifying attribute equals `value`."""
        ...

    @abstractmethod
    def read_all(self, key: KeyArg, value: str = "") -> List[Computer]:
        """
        Return every computer selected by an Assignee, NotAssigned or All key.

        An empty selection raises NotFoundError rather than returning [].
        `value` is ignored for NotAssigned and All.
        """
        ...

    @abstractmethod
    def add(self, computer: Computer) -> None:
        ...

    @abstractmethod
    def delete(self, key: KeyArg, value: str) -> None:
        ...

    @abstractmethod
    def assign(self, key: KeyArg, value: str, assignee: str) -> None:
        """Set the assignee of one computer. Only the assignee field changes."""
        ...

    def unassign(self, key: KeyArg, value: str) -> None:
        self.assign(key, value, "")

    @abstractmethod
    def close(self) -> None:
        """Release the file handle or database connection held by the store."""
        ...

    def __enter__(self) -> "ComputerStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
