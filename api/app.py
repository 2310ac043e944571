from __future__ import annotations

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers

from api.routes.inventory import router as inventory_router
from inventory_service.loading import InventoryStore

DEFAULT_ALLOWED_ORIGIN = "http://localhost:5173"


class PreflightCORSMiddleware(CORSMiddleware):
    """
    CORSMiddleware whose preflight answer is always an empty 200. The allow
    headers are still computed by Starlette, so a browser only proceeds for
    the configured origin.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        checked = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in checked.headers.items()
            if key.lower() not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


def create_app(store: InventoryStore, allowed_origin: str = DEFAULT_ALLOWED_ORIGIN) -> FastAPI:
    app = FastAPI(title="Inventory API", version="0.1.0")
    app.state.store = store
    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=[allowed_origin],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(inventory_router)

    return app
