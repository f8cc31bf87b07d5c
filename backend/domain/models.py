"""
Core domain models for the computer inventory.
These are framework-agnostic and shared by every storage backend.
"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Union

from domain.errors import MalformedError, UnknownKeyKindError

ASSIGNEE_CODE_LENGTH = 3


class KeyKind(str, Enum):
    """Attribute used to look up computers in a store."""
    # Identifying attributes: each resolves to at most one computer
    MAC = "MAC"
    NAME = "Name"
    IP = "IP"

    # Multi-read selectors
    ASSIGNEE = "Assignee"
    NOT_ASSIGNED = "NotAssigned"
    ALL = "All"


IDENTIFYING_KEYS = frozenset({KeyKind.MAC, KeyKind.NAME, KeyKind.IP})
MULTI_READ_KEYS = frozenset({KeyKind.ASSIGNEE, KeyKind.NOT_ASSIGNED, KeyKind.ALL})

FIELD_NAMES = ("mac", "name", "ip", "assignee", "description")


def parse_key_kind(value: Union[str, KeyKind]) -> KeyKind:
    """Coerce a raw key kind; unrecognized values raise UnknownKeyKindError."""
    if isinstance(value, KeyKind):
        return value
    try:
        return KeyKind(value)
    except ValueError:
        raise UnknownKeyKindError(f"Unknown key type {value}")


@dataclass
class Computer:
    """
    An inventory record.

    `mac`, `name` and `ip` are mandatory and each unique across a store.
    `assignee` is either empty (unassigned) or a 3-character employee code.
    Only `assignee` changes after creation.
    """
    mac: str
    name: str
    ip: str
    assignee: str = ""
    description: str = ""

    def key_value(self, key: KeyKind) -> str:
        """Return the value of an identifying attribute."""
        if key == KeyKind.MAC:
            return self.mac
        if key == KeyKind.NAME:
            return self.name
        if key == KeyKind.IP:
            return self.ip
        raise ValueError(f"{key.value} is not an identifying attribute")

    def matches(self, key: KeyKind, value: str) -> bool:
        return self.key_value(key) == value

    def collides_with(self, other: "Computer") -> bool:
        """True if any identifying attribute is shared with `other`."""
        return self.mac == other.mac or self.name == other.name or self.ip == other.ip

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Computer":
        """Build from a decoded record; absent or null fields become empty."""
        values = {}
        for field_name in FIELD_NAMES:
            value = data.get(field_name)
            if value is None:
                value = ""
            elif not isinstance(value, str):
                raise MalformedError(f"'{field_name}' must be a string")
            values[field_name] = value
        return cls(**values)


def is_valid_assignee(assignee: str) -> bool:
    """Empty means unassigned; anything else must be a 3-character code."""
    return assignee == "" or len(assignee) == ASSIGNEE_CODE_LENGTH


@dataclass(frozen=True)
class Notification:
    """Over-assignment alert delivered to the external listener."""
    level: str
    who: str
    message: str

    def to_payload(self) -> Dict[str, str]:
        return {
            "level": self.level,
            "employeeAbbreviation": self.who,
            "message": self.message,
        }
