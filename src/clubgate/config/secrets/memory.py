"""Config secrets – process-local credential store."""
from __future__ import annotations

import threading
from typing import Mapping

from clubgate.config.secrets.port import SecretRef, SecretStore


class InMemorySecretStore(SecretStore):
    """Holds the webhook API key and HMAC secret for the lifetime of the process.

    Values are never written to disk by this store; durable copies live in the
    preferences file and are loaded into it at startup.  Reads and writes are
    guarded by a lock because the listener thread and the UI thread both use it.

    Raises :class:`KeyError` for an unknown secret.
    """

    def __init__(self, initial: Mapping[SecretRef, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._values: dict[str, str] = {str(ref): value for ref, value in (initial or {}).items()}

    async def get(self, ref: SecretRef) -> str:
        with self._lock:
            try:
                return self._values[str(ref)]
            except KeyError:
                raise KeyError(f"Secret not found: {ref}") from None

    async def get_all(self, path: str) -> dict[str, str]:
        prefix = path.rstrip("/") + "/"
        with self._lock:
            return {k[len(prefix):]: v for k, v in self._values.items() if k.startswith(prefix)}

    async def set(self, ref: SecretRef, value: str) -> None:
        with self._lock:
            self._values[str(ref)] = value

    def get_or_default(self, ref: SecretRef, default: str = "") -> str:
        """Synchronous read for threads without an event loop."""
        with self._lock:
            return self._values.get(str(ref), default)


__all__ = ["InMemorySecretStore"]
