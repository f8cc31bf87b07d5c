from .base import ComputerStore
from .volatile import VolatileComputerStore
from .json_store import JsonComputerStore
from .sql_store import SqlComputerStore
from .factory import STORAGE_TYPES, get_store
from . import models

__all__ = [
    "ComputerStore",
    "VolatileComputerStore",
    "JsonComputerStore",
    "SqlComputerStore",
    "STORAGE_TYPES",
    "get_store",
    "models",
]
