from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .errors import InventoryLoadError, ParseError, RecordReadError
from .models import InventoryItem, LoadReport, LoadState
from .parser import parse_record
from .source import RecordReader, open_source
from .store import InventoryStore

logger = logging.getLogger(__name__)

# Queue end marker. One per worker on the record queue, one on the result queue.
_DONE = object()

RecordParser = Callable[[Sequence[str]], InventoryItem]


@dataclass
class LoaderConfig:
    source_path: Union[str, Path] = "inventory.csv"
    worker_count: int = 4
    queue_size: int = 100
    delimiter: str = ","


class FirstErrorCell:
    """
    Single-slot fatal error channel. The first offered error is kept and
    later ones are discarded without blocking the caller. The coordinator
    closes the cell once every worker is done; `wait` blocks until then.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self._closed = threading.Event()

    def offer(self, error: BaseException) -> bool:
        with self._lock:
            if self._error is not None or self._closed.is_set():
                return False
            self._error = error
            return True

    def close(self) -> None:
        self._closed.set()

    def wait(self) -> Optional[BaseException]:
        self._closed.wait()
        with self._lock:
            return self._error


class InventoryLoader:
    """
    Bulk-loads a delimited inventory file into an InventoryStore.

    A feeder thread streams raw records into a bounded queue, a fixed pool of
    worker threads parses them, and the calling thread collects parsed items
    into the store. A coordinator thread waits for the workers and then closes
    the result queue and the error cell, so the drain always terminates.
    Items land in the store in completion order, not file order.
    """

    def __init__(
        self,
        store: InventoryStore,
        worker_count: int = 4,
        queue_size: int = 100,
        delimiter: str = ",",
        parser: RecordParser = parse_record,
    ):
        if worker_count < 1:
            raise ValueError("worker_count must be >= 1")
        if queue_size < 1:
            raise ValueError("queue_size must be >= 1")
        self.store = store
        self.worker_count = worker_count
        self.queue_size = queue_size
        self.delimiter = delimiter
        self.parser = parser
        self._state = LoadState.IDLE
        self._state_lock = threading.Lock()
        self._skipped = 0
        self._skipped_lock = threading.Lock()

    @property
    def state(self) -> LoadState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: LoadState) -> None:
        with self._state_lock:
            self._state = state
        logger.debug("Inventory load state -> %s", state.value)

    def load(self, path: Union[str, Path]) -> LoadReport:
        started = time.perf_counter()
        self._skipped = 0
        self._set_state(LoadState.IDLE)
        try:
            with open_source(path, delimiter=self.delimiter) as reader:
                reader.read_header()
                loaded = self._run_pipeline(reader)
        except InventoryLoadError:
            self._set_state(LoadState.FAILED)
            raise

        self._set_state(LoadState.COMPLETED)
        report = LoadReport(
            loaded=loaded,
            skipped=self._skipped,
            elapsed_seconds=time.perf_counter() - started,
            state=LoadState.COMPLETED,
        )
        logger.info(
            "Loaded %d items from %s in %.3fs (%d skipped)",
            report.loaded,
            path,
            report.elapsed_seconds,
            report.skipped,
        )
        return report

    def _run_pipeline(self, reader: RecordReader) -> int:
        records: queue.Queue = queue.Queue(maxsize=self.queue_size)
        results: queue.Queue = queue.Queue(maxsize=self.queue_size)
        errors = FirstErrorCell()

        workers = [
            threading.Thread(
                target=self._work,
                args=(records, results, errors),
                name=f"inventory-worker-{i}",
                daemon=True,
            )
            for i in range(self.worker_count)
        ]
        feeder = threading.Thread(
            target=self._feed, args=(reader, records, errors), name="inventory-feeder", daemon=True
        )
        coordinator = threading.Thread(
            target=self._close_when_done,
            args=(workers, results, errors),
            name="inventory-coordinator",
            daemon=True,
        )

        self._set_state(LoadState.FEEDING)
        for worker in workers:
            worker.start()
        feeder.start()
        coordinator.start()

        loaded = self._collect(results)
        feeder.join()
        coordinator.join()

        error = errors.wait()
        if error is not None:
            logger.error("Inventory load failed after committing %d items: %s", loaded, error)
            if isinstance(error, InventoryLoadError):
                raise error
            raise InventoryLoadError(f"{reader.path}: {error}", reader.path) from error
        return loaded

    def _feed(self, reader: RecordReader, records: queue.Queue, errors: FirstErrorCell) -> None:
        try:
            while True:
                try:
                    record = reader.read()
                except RecordReadError as exc:
                    if not errors.offer(exc):
                        logger.debug("Discarding read error, one is already recorded: %s", exc)
                    return
                if record is None:
                    return
                records.put(record)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error reading %s", reader.path)
            errors.offer(exc)
        finally:
            for _ in range(self.worker_count):
                records.put(_DONE)

    def _work(self, records: queue.Queue, results: queue.Queue, errors: FirstErrorCell) -> None:
        while True:
            record = records.get()
            if record is _DONE:
                return
            try:
                item = self.parser(record)
            except ParseError as exc:
                logger.warning("Error parsing record: %s", exc)
                with self._skipped_lock:
                    self._skipped += 1
                continue
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error parsing record %r", record)
                errors.offer(exc)
                continue
            results.put(item)

    def _close_when_done(
        self, workers: List[threading.Thread], results: queue.Queue, errors: FirstErrorCell
    ) -> None:
        for worker in workers:
            worker.join()
        self._set_state(LoadState.DRAINING)
        # Result queue first so the collector drains everything before the error check.
        results.put(_DONE)
        errors.close()

    def _collect(self, results: queue.Queue) -> int:
        loaded = 0
        while True:
            item = results.get()
            if item is _DONE:
                return loaded
            self.store.append(item)
            loaded += 1


def load_inventory(config: LoaderConfig, store: InventoryStore) -> LoadReport:
    """
    Entry point used at process start. Builds a loader from the config and
    runs it against the configured source file.
    """
    loader = InventoryLoader(
        store,
        worker_count=config.worker_count,
        queue_size=config.queue_size,
        delimiter=config.delimiter,
    )
    return loader.load(config.source_path)
