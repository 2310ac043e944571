from __future__ import annotations

from typing import Optional, Sequence


class InventoryLoadError(Exception):
    """
    Fatal error while loading the inventory source. Any of these aborts the
    load call and, at startup, keeps the server from accepting connections.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SourceOpenError(InventoryLoadError):
    pass


class HeaderReadError(InventoryLoadError):
    pass


class RecordReadError(InventoryLoadError):
    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        super().__init__(message, path)
        self.line = line


class ParseError(ValueError):
    """
    Non-fatal error for a single record. The record is dropped and loading
    continues.
    """

    def __init__(self, message: str, record: Sequence[str] = ()):
        super().__init__(message)
        self.record = list(record)


class InsufficientFields(ParseError):
    pass


class InvalidInteger(ParseError):
    def __init__(self, field: str, value: str, record: Sequence[str] = ()):
        super().__init__(f"invalid {field}: {value!r} is not an integer", record)
        self.field = field
        self.value = value


class InvalidFloat(ParseError):
    def __init__(self, field: str, value: str, record: Sequence[str] = ()):
        super().__init__(f"invalid {field}: {value!r} is not a number", record)
        self.field = field
        self.value = value


class EncodingError(Exception):
    """Raised when the inventory cannot be serialized for a response."""
