"""
Process entry point: load the inventory file, then serve it.

Usage:
    python -m api.main

The load runs to completion before the server binds its port. A load
failure logs the reason and exits with status 1.
"""

from __future__ import annotations

import logging
import sys

import uvicorn

from api.app import create_app
from api.dependencies import get_settings
from inventory_service.loading import InventoryLoadError, InventoryStore, load_inventory

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    store = InventoryStore()
    try:
        load_inventory(settings.loader_config(), store)
    except InventoryLoadError as exc:
        logger.error("Failed to load inventory: %s", exc)
        sys.exit(1)

    app = create_app(store, allowed_origin=settings.allowed_origin)
    logger.info("Server starting on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
