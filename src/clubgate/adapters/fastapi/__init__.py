"""FastAPI adapter – webhook app, uvicorn thread and the listener service."""
from clubgate.adapters.fastapi.app import HealthProvider, create_webhook_app
from clubgate.adapters.fastapi.listener import ListenerState, WebhookListenerService
from clubgate.adapters.fastapi.server import UvicornServerThread

__all__ = [
    "HealthProvider",
    "ListenerState",
    "UvicornServerThread",
    "WebhookListenerService",
    "create_webhook_app",
]
