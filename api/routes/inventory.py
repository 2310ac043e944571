from __future__ import annotations

import json
import logging
from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException, Response

from api.dependencies import get_store
from inventory_service.loading import EncodingError, InventoryItem, InventoryStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["inventory"])


def encode_inventory(items: Sequence[InventoryItem]) -> bytes:
    try:
        # allow_nan=False: NaN and infinite prices are not valid JSON.
        return json.dumps([item.to_dict() for item in items], allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingError(str(exc)) from exc


@router.get("/inventory")
def list_inventory(store: InventoryStore = Depends(get_store)):
    with store.reading() as items:
        try:
            body = encode_inventory(items)
        except EncodingError:
            logger.exception("Failed to encode inventory response")
            raise HTTPException(status_code=500, detail="Failed to encode response")
    return Response(content=body, media_type="application/json")


@router.options("/inventory")
def inventory_options():
    return Response(status_code=200)
