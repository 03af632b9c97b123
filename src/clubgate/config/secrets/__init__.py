"""Config secrets – secret reference, store port, process-local store."""
from clubgate.config.secrets.memory import InMemorySecretStore
from clubgate.config.secrets.port import (
    WEBHOOK_API_KEY,
    WEBHOOK_HMAC_SECRET,
    SecretRef,
    SecretStore,
)

__all__ = [
    "InMemorySecretStore",
    "SecretRef",
    "SecretStore",
    "WEBHOOK_API_KEY",
    "WEBHOOK_HMAC_SECRET",
]
