"""JWT helpers for bearer-token authentication.

Token issuance belongs to the account service; this module mirrors its
claims so the API can verify tokens and tests can mint them.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt

from cash_or_card.core.settings import settings

DEFAULT_TOKEN_TTL = timedelta(days=30)


def create_access_token(
    user_id: int | str,
    extra_claims: dict[str, Any] | None = None,
    expires_in: timedelta = DEFAULT_TOKEN_TTL,
) -> str:
    """Create a signed JWT whose subject is the user identifier."""
    to_encode: dict[str, Any] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + expires_in
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT, raising ``jose.JWTError`` on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
