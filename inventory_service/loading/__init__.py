"""
Loading subsystem exports.
"""

from .errors import (
    EncodingError,
    HeaderReadError,
    InsufficientFields,
    InvalidFloat,
    InvalidInteger,
    InventoryLoadError,
    ParseError,
    RecordReadError,
    SourceOpenError,
)
from .models import InventoryItem, LoadReport, LoadState
from .parser import parse_record
from .pipeline import FirstErrorCell, InventoryLoader, LoaderConfig, load_inventory
from .source import RecordReader, open_source
from .store import InventoryStore, ReadWriteLock

__all__ = [
    "EncodingError",
    "FirstErrorCell",
    "HeaderReadError",
    "InsufficientFields",
    "InvalidFloat",
    "InvalidInteger",
    "InventoryItem",
    "InventoryLoadError",
    "InventoryLoader",
    "InventoryStore",
    "LoadReport",
    "LoadState",
    "LoaderConfig",
    "ParseError",
    "ReadWriteLock",
    "RecordReadError",
    "RecordReader",
    "SourceOpenError",
    "load_inventory",
    "open_source",
    "parse_record",
]
