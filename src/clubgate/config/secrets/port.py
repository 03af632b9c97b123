"""Config secrets – SecretRef and SecretStore port."""
from __future__ import annotations

import abc
import dataclasses


@dataclasses.dataclass(frozen=True)
class SecretRef:
    """Reference to a named secret."""
    path: str
    key: str

    def __str__(self) -> str:
        return f"{self.path}/{self.key}"


WEBHOOK_API_KEY = SecretRef(path="webhook", key="api_key")
WEBHOOK_HMAC_SECRET = SecretRef(path="webhook", key="hmac_secret")


class SecretStore(abc.ABC):
    """Port: read and replace secrets."""

    @abc.abstractmethod
    async def get(self, ref: SecretRef) -> str: ...

    @abc.abstractmethod
    async def get_all(self, path: str) -> dict[str, str]: ...

    @abc.abstractmethod
    async def set(self, ref: SecretRef, value: str) -> None: ...


__all__ = ["WEBHOOK_API_KEY", "WEBHOOK_HMAC_SECRET", "SecretRef", "SecretStore"]
