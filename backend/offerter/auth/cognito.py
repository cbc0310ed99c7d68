from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from cachetools import TTLCache
from jose import JWTError, jwt

from ..settings import settings


class CognitoAuthError(Exception):
    def __init__(self, message: str, *, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class VerifiedUser:
    """The authenticated caller. `sub` is the owner id of everything they create."""

    sub: str
    username: str
    email: str | None
    claims: dict[str, Any]


_JWKS_CACHE: TTLCache[str, dict[str, Any]] = TTLCache(maxsize=4, ttl=60 * 60)


def _issuer() -> str:
    if not settings.cognito_user_pool_id:
        raise CognitoAuthError("Authentication is not configured", status_code=500)
    region = settings.cognito_region or settings.aws_region
    return f"https://cognito-idp.{region}.amazonaws.com/{settings.cognito_user_pool_id}"


def _get_jwks() -> dict[str, Any]:
    url = f"{_issuer()}/.well-known/jwks.json"
    cached = _JWKS_CACHE.get(url)
    if cached:
        return cached

    try:
        with httpx.Client(timeout=10.0) as client:
            resp = client.get(url)
            resp.raise_for_status()
            jwks = resp.json()
    except httpx.HTTPError as e:
        raise CognitoAuthError("Identity provider unavailable", status_code=503) from e

    _JWKS_CACHE[url] = jwks
    return jwks


def verify_bearer_token(token: str) -> VerifiedUser:
    if not token:
        raise CognitoAuthError("Missing token")
    if not settings.cognito_client_id:
        raise CognitoAuthError("Authentication is not configured", status_code=500)

    jwks = _get_jwks()
    try:
        claims = jwt.decode(
            token,
            jwks,
            algorithms=["RS256"],
            issuer=_issuer(),
            # Access tokens carry client_id instead of aud; checked below.
            options={"verify_aud": False, "verify_iss": True, "verify_exp": True},
        )
    except JWTError as e:
        raise CognitoAuthError("Invalid token") from e

    token_use = claims.get("token_use")
    if token_use and token_use not in ("id", "access"):
        raise CognitoAuthError("Invalid token")

    audience = claims.get("client_id") if token_use == "access" else claims.get("aud")
    if audience != settings.cognito_client_id:
        raise CognitoAuthError("Invalid token")

    sub = str(claims.get("sub") or "")
    if not sub:
        raise CognitoAuthError("Invalid token")

    email = claims.get("email")
    if email is not None:
        email = str(email)

    username = (
        str(claims.get("preferred_username") or "").strip()
        or str(claims.get("cognito:username") or "").strip()
        or (email or "")
    )

    return VerifiedUser(sub=sub, username=username, email=email, claims=claims)
