from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class LoadState(str, Enum):
    IDLE = "idle"
    FEEDING = "feeding"
    DRAINING = "draining"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class InventoryItem:
    id: int
    sku: str
    product_name: str
    category: str
    stock: int
    price: float
    last_updated: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sku": self.sku,
            "product_name": self.product_name,
            "category": self.category,
            "stock": self.stock,
            "price": self.price,
            "last_updated": self.last_updated,
        }


@dataclass
class LoadReport:
    loaded: int
    skipped: int
    elapsed_seconds: float
    state: LoadState = LoadState.COMPLETED
