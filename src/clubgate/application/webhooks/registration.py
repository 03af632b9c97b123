"""Application webhooks – callback registration with the external school server.

The client never retries and never touches local configuration; the operator
decides what to do with a failed handshake.
"""
from __future__ import annotations

import dataclasses
import secrets

import httpx

from clubgate.config.secrets import WEBHOOK_API_KEY, SecretStore
from clubgate.kernel.errors import RegistrationError
from clubgate.kernel.types import Err, Ok, Result
from clubgate.observability.logging import get_logger

__all__ = ["Registered", "RegistrationClient", "generate_api_key", "generate_hmac_secret"]

logger = get_logger(__name__)

_TOKEN_BYTES = 32


def generate_api_key() -> str:
    """256 random bits, URL-safe base64 without padding."""
    return secrets.token_urlsafe(_TOKEN_BYTES)


def generate_hmac_secret() -> str:
    return secrets.token_urlsafe(_TOKEN_BYTES)


@dataclasses.dataclass(frozen=True)
class Registered:
    target_url: str
    callback_url: str
    status_code: int


class RegistrationClient:
    """Registers (and unregisters) this listener's callback URL.

    Parameters
    ----------
    secrets:
        Source of the api key sent with the registration.
    timeout:
        Per-request timeout in seconds.
    client:
        Optional shared ``httpx.AsyncClient``; a short-lived one is created
        per call otherwise.
    """

    def __init__(
        self,
        secrets: SecretStore,
        *,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._secrets = secrets
        self._timeout = timeout
        self._client = client

    async def register(self, target_url: str, callback_url: str) -> Result[Registered, RegistrationError]:
        try:
            api_key = await self._secrets.get(WEBHOOK_API_KEY)
        except KeyError:
            api_key = ""
        if not api_key:
            return Err(RegistrationError("No webhook api key configured", target_url=target_url))

        body = {"callbackUrl": callback_url, "apiKey": api_key}
        return await self._send("POST", target_url, callback_url, json=body)

    async def unregister(self, target_url: str, callback_url: str) -> Result[Registered, RegistrationError]:
        return await self._send("DELETE", target_url, callback_url, params={"url": callback_url})

    async def _send(
        self,
        method: str,
        target_url: str,
        callback_url: str,
        **kwargs: object,
    ) -> Result[Registered, RegistrationError]:
        try:
            if self._client is not None:
                resp = await self._client.request(method, target_url, timeout=self._timeout, **kwargs)  # type: ignore[arg-type]
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.request(method, target_url, **kwargs)  # type: ignore[arg-type]
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("webhook.registration_transport_error", method=method, target_url=target_url, error=str(exc))
            return Err(RegistrationError(f"Could not reach {target_url}: {exc}", target_url=target_url, cause=exc))

        if not resp.is_success:
            logger.warning(
                "webhook.registration_rejected",
                method=method,
                target_url=target_url,
                status_code=resp.status_code,
            )
            return Err(
                RegistrationError(
                    f"{method} {target_url} returned HTTP {resp.status_code}",
                    target_url=target_url,
                    status_code=resp.status_code,
                    detail={"response": resp.text[:500]},
                )
            )

        logger.info("webhook.registration_ok", method=method, target_url=target_url, status_code=resp.status_code)
        return Ok(Registered(target_url=target_url, callback_url=callback_url, status_code=resp.status_code))
