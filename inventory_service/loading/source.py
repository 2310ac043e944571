from __future__ import annotations

import csv
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .errors import HeaderReadError, RecordReadError, SourceOpenError

logger = logging.getLogger(__name__)

QUOTE = '"'


class _LineTap:
    """Line iterator that remembers the raw lines csv.reader pulled for a record."""

    def __init__(self, handle):
        self._handle = handle
        self.lines: List[str] = []

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = next(self._handle)
        self.lines.append(line)
        return line


def has_bare_quote(raw: str, delimiter: str = ",") -> bool:
    """
    True when a quote appears inside a field that does not start with one.
    csv.reader accepts `ab"c` even in strict mode; the source format does not.
    Quoted fields are assumed well formed, strict mode already checks them.
    """
    state = "start"
    for ch in raw:
        if state == "start":
            if ch == QUOTE:
                state = "quoted"
            elif ch not in (delimiter, "\r", "\n"):
                state = "unquoted"
        elif state == "unquoted":
            if ch == QUOTE:
                return True
            if ch in (delimiter, "\r", "\n"):
                state = "start"
        elif state == "quoted":
            if ch == QUOTE:
                state = "closed"
        else:
            # A quote right after a closing quote is an escaped quote.
            state = "quoted" if ch == QUOTE else "start"
    return False


class RecordReader:
    """
    Sequential reader over a delimited inventory file. Wraps csv.reader and
    turns low-level failures into the loader's error types.
    """

    def __init__(self, handle, path: str, delimiter: str = ","):
        self.path = path
        self.delimiter = delimiter
        self._tap = _LineTap(handle)
        self._reader = csv.reader(self._tap, delimiter=delimiter, strict=True)

    @property
    def line_num(self) -> int:
        return self._reader.line_num

    def read_header(self) -> List[str]:
        try:
            header = self._next_nonblank()
        except (csv.Error, UnicodeDecodeError, OSError) as exc:
            raise HeaderReadError(f"cannot read header of {self.path}: {exc}", self.path) from exc
        if header is None:
            raise HeaderReadError(f"cannot read header of {self.path}: file is empty", self.path)
        return header

    def read(self) -> Optional[List[str]]:
        """Return the next record, or None at end of input."""
        try:
            return self._next_nonblank()
        except (csv.Error, UnicodeDecodeError, OSError) as exc:
            line = self._reader.line_num
            raise RecordReadError(f"{self.path}, line {line}: {exc}", self.path, line) from exc

    def _next_nonblank(self) -> Optional[List[str]]:
        while True:
            self._tap.lines.clear()
            row = next(self._reader, None)
            if row is None:
                return None
            if not row:
                continue
            if has_bare_quote("".join(self._tap.lines), self.delimiter):
                raise csv.Error('bare " in non-quoted field')
            return row


@contextmanager
def open_source(path: Union[str, Path], delimiter: str = ",") -> Iterator[RecordReader]:
    path_str = str(path)
    try:
        handle = open(path_str, "r", encoding="utf-8", newline="")
    except OSError as exc:
        raise SourceOpenError(f"cannot open inventory source {path_str}: {exc}", path_str) from exc
    logger.debug("Opened inventory source %s", path_str)
    try:
        yield RecordReader(handle, path_str, delimiter=delimiter)
    finally:
        handle.close()
