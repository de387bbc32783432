"""FastAPI inbound channel for the browser producer.

The producer POSTs ``{"action": ..., "data": {...}}`` messages and polls
``/commands`` for anything addressed to its tab.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.command_queue import PendingCommandQueue
from core.events import parse_message
from core.overlay import OverlayService

LOGGER = logging.getLogger(__name__)

OK = {"status": "ok"}


def create_app(service: OverlayService, commands: PendingCommandQueue) -> FastAPI:
    """Build the HTTP app bound to one overlay service."""

    app = FastAPI(title="matchdeck", docs_url=None, redoc_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.post("/")
    async def receive_message(request: Request) -> JSONResponse:
        body = await request.body()
        try:
            raw = json.loads(body or b"null")
        except (json.JSONDecodeError, UnicodeDecodeError):
            LOGGER.debug("Dropping non-JSON producer message")
            return JSONResponse(OK)

        try:
            event = parse_message(raw)
            if event is not None:
                service.handle(event)
        except Exception:
            LOGGER.exception("Error while processing producer message: %s", body.decode("utf-8", errors="replace"))
            return JSONResponse({"status": "error"}, status_code=500)
        return JSONResponse(OK)

    @app.get("/commands")
    async def next_command(tabId: str = "") -> dict[str, Any]:
        command = commands.pop(tabId) if tabId.strip() else None
        if command is None:
            return {}
        return command.to_payload()

    @app.get("/view")
    async def current_view() -> dict[str, Any]:
        view = service.view
        payload = asdict(view)
        payload["is_empty"] = view.is_empty
        return payload

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "matches": len(service.store)}

    return app
