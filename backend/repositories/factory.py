"""
Build a computer store from a storage type name.
"""
import logging
from typing import Optional

from domain.errors import UnknownStorageTypeError
from repositories.base import ComputerStore
from repositories.json_store import JsonComputerStore
from repositories.sql_store import SqlComputerStore
from repositories.volatile import VolatileComputerStore

logger = logging.getLogger(__name__)

STORAGE_TYPES = ("volatile", "json", "sqlite")
DEFAULT_FILES = {
    "json": "default.json",
    "sqlite": "default.sqlite",
}


def get_store(storage_type: str, path: Optional[str] = None) -> ComputerStore:
    """
    Create the backend for `storage_type`.

    Persistent types fall back to default.json / default.sqlite in the current
    directory when no path is given. The volatile store ignores `path`.
    """
    if storage_type == "volatile":
        return VolatileComputerStore()
    if storage_type == "json":
        return JsonComputerStore(path or DEFAULT_FILES["json"])
    if storage_type == "sqlite":
        return SqlComputerStore(path or DEFAULT_FILES["sqlite"])
    logger.error("Error unknown DB type %s", storage_type)
    raise UnknownStorageTypeError(f"Unknown storage type {storage_type}")
