"""Application webhooks – HMAC-SHA256 payload signing and verification."""
from __future__ import annotations

import hashlib
import hmac
import string

__all__ = ["WebhookSigner", "sign", "verify"]

_HEX_DIGITS = frozenset(string.hexdigits)
_DIGEST_HEX_LENGTH = hashlib.sha256().digest_size * 2


class WebhookSigner:
    """Signs and verifies webhook payloads using HMAC-SHA256.

    Signatures are the lowercase hex digest over the exact request bytes.
    Senders that follow the GitHub convention prefix it with ``sha256=``;
    :meth:`verify` accepts both forms.
    """

    ALG = "sha256"

    @classmethod
    def sign(cls, secret: str, payload: bytes) -> str:
        """Return the lowercase hex HMAC of *payload* keyed by *secret*."""
        return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()

    @classmethod
    def verify(cls, secret: str, payload: bytes, signature: str | None) -> bool:
        """Return ``True`` only when *signature* matches.

        Never raises: an empty secret, an empty body or a signature that is
        not a 64-digit hex string all verify as ``False``.
        """
        if not secret or not payload or not signature:
            return False
        provided = signature.strip()
        prefix = f"{cls.ALG}="
        if provided[: len(prefix)].lower() == prefix:
            provided = provided[len(prefix):]
        if len(provided) != _DIGEST_HEX_LENGTH or not _HEX_DIGITS.issuperset(provided):
            return False
        expected = cls.sign(secret, payload)
        return hmac.compare_digest(expected.encode("ascii"), provided.lower().encode("ascii"))


def sign(secret: str, raw_body: bytes) -> str:
    return WebhookSigner.sign(secret, raw_body)


def verify(secret: str, raw_body: bytes, provided_signature: str | None) -> bool:
    return WebhookSigner.verify(secret, raw_body, provided_signature)
