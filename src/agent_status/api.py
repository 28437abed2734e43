"""
HTTP surface for the status poller.

Requires fastapi: pip install fastapi
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .errors import BackendUnavailableError
from .logging import get_logger
from .poller import StatusPoller


class StatusUpdateResponse(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)


def create_app(poller: StatusPoller, *, title: str = "Agent Status") -> FastAPI:
    """Build a FastAPI app serving one poller.

    Routes:
        GET    /healthz
        GET    /v1/runs/{run_id}/status   latest status update (empty for unknown runs)
        DELETE /v1/runs/{run_id}/status   clear a run's status update
    """
    app = FastAPI(title=title, version="0.1.0")
    logger = get_logger()

    @app.exception_handler(BackendUnavailableError)
    async def backend_unavailable(request: Request, exc: BackendUnavailableError) -> JSONResponse:
        logger.log_error(exc, "Status backend unavailable", path=request.url.path)
        return JSONResponse(status_code=503, content={"detail": exc.message, "error": exc.to_dict()})

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"ok": "true", "backend": poller.store.backend_name}

    @app.get("/v1/runs/{run_id}/status", response_model=StatusUpdateResponse)
    async def get_status(run_id: str) -> dict[str, Any]:
        update = await poller.get_latest(run_id)
        return update.to_dict()

    @app.delete("/v1/runs/{run_id}/status", status_code=204)
    async def delete_status(run_id: str) -> Response:
        await poller.delete_status_update(run_id)
        return Response(status_code=204)

    return app


__all__ = ["StatusUpdateResponse", "create_app"]
