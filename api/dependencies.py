from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from fastapi import Request

from inventory_service.loading import InventoryStore, LoaderConfig


@dataclass(frozen=True)
class ServiceSettings:
    inventory_file: Path
    worker_count: int
    queue_size: int
    allowed_origin: str
    host: str
    port: int
    log_level: str

    def loader_config(self) -> LoaderConfig:
        return LoaderConfig(
            source_path=self.inventory_file,
            worker_count=self.worker_count,
            queue_size=self.queue_size,
        )


@lru_cache(maxsize=1)
def get_settings() -> ServiceSettings:
    return ServiceSettings(
        inventory_file=Path(os.getenv("INVENTORY_FILE", "inventory.csv")),
        worker_count=int(os.getenv("INVENTORY_WORKERS", "4")),
        queue_size=int(os.getenv("INVENTORY_QUEUE_SIZE", "100")),
        allowed_origin=os.getenv("INVENTORY_ALLOWED_ORIGIN", "http://localhost:5173"),
        host=os.getenv("INVENTORY_HOST", "0.0.0.0"),
        port=int(os.getenv("INVENTORY_PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store
