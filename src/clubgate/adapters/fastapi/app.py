"""FastAPI adapter – webhook application factory."""
from __future__ import annotations

from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from clubgate.application.webhooks import WebhookReceiver, WebhookResponse
from clubgate.config.webhook import HEALTH_PATH, METRICS_PATH

HealthProvider = Callable[[], dict[str, Any]]


def create_webhook_app(receiver: WebhookReceiver, health: HealthProvider) -> FastAPI:
    """Build the listener app.

    Routes: ``POST <webhook_path>``, ``POST <webhook_path>/retry``,
    ``GET /health`` and ``GET /metrics``.  Everything else, including the
    interactive docs, answers 404.
    """
    app = FastAPI(
        title="clubgate webhook listener",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.post(receiver.config.webhook_path)
    async def receive_webhook(request: Request) -> JSONResponse:
        body = await request.body()
        return _respond(receiver.handle(body, request.headers, client=_client_host(request)))

    @app.post(receiver.retry_path)
    async def receive_retry(request: Request) -> JSONResponse:
        body = await request.body()
        return _respond(receiver.handle_retry(body, request.headers, client=_client_host(request)))

    @app.get(HEALTH_PATH)
    async def health_check() -> dict[str, Any]:
        return health()

    @app.get(METRICS_PATH)
    async def metrics() -> dict[str, Any]:
        return receiver.metrics()

    return app


def _client_host(request: Request) -> str | None:
    return request.client.host if request.client else None


def _respond(result: WebhookResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


__all__ = ["HealthProvider", "create_webhook_app"]
