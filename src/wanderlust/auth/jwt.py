"""
Identity-provider token handling.

The identity provider issues JWTs whose ``sub`` claim is the caller's stable
external subject. RS256 tokens are checked against the provider's public key;
HS* algorithms use the shared ``jwt_secret`` instead (local runs and tests).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import jwt

from wanderlust.config import get_settings

_private_key: str | None = None
_public_key: str | None = None


def _is_symmetric(algorithm: str) -> bool:
    return algorithm.upper().startswith("HS")


def _signing_key() -> str:
    """Key used to mint tokens (the provider's job in production)."""
    global _private_key  # noqa: PLW0603
    settings = get_settings()
    if _is_symmetric(settings.jwt_algorithm):
        return settings.jwt_secret
    if _private_key is None:
        _private_key = Path(settings.jwt_private_key_path).read_text()
    return _private_key


def _verification_key() -> str:
    """Key used to verify incoming tokens (cached after first read)."""
    global _public_key  # noqa: PLW0603
    settings = get_settings()
    if _is_symmetric(settings.jwt_algorithm):
        return settings.jwt_secret
    if _public_key is None:
        _public_key = Path(settings.jwt_public_key_path).read_text()
    return _public_key


def reset_keys() -> None:
    """Reset cached keys (useful for testing)."""
    global _private_key, _public_key  # noqa: PLW0603
    _private_key = None
    _public_key = None


def create_access_token(subject: str, **claims: Any) -> str:  # noqa: ANN401
    """
    Mint an access token for ``subject``.

    Args:
        subject: External auth subject identifying the caller.
        **claims: Extra claims (e.g. email, name) copied into the payload.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        **claims,
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
        "iss": settings.jwt_issuer,
    }
    return jwt.encode(payload, _signing_key(), algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify and decode an identity token.

    Returns:
        Decoded payload dictionary.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired or has no subject.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            _verification_key(),
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    if not payload.get("sub"):
        msg = "Token has no subject"
        raise jwt.InvalidTokenError(msg)

    return payload
