# src/auth/tokens.py
"""
OAuth-like token issuance for the demo API.

Grants:
- client_credentials : client id/secret -> access token
- authorization_code : fixed demo code (simulated consent) -> access + refresh token
- refresh_token      : any refresh token -> new access token

Access tokens are HS256 JWTs carrying sub + scope, valid for ttl_seconds.
"""

from __future__ import annotations

import hmac
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import quote

import jwt

from src.utils.config import Settings

ALGORITHM = "HS256"
DEFAULT_SCOPE = "quotes:read quotes:write"
DEMO_AUTH_CODE = "demo-code"
DEMO_REFRESH_TOKEN = "demo-refresh"

_BEARER_PREFIX = re.compile(r"^\s*Bearer\s+", re.IGNORECASE)


class OAuthError(Exception):
    def __init__(self, error: str):
        super().__init__(error)
        self.error = error


class InvalidTokenError(Exception):
    pass


def issue_access_token(secret: str, subject: str, ttl_seconds: int = 3600, scope: str = DEFAULT_SCOPE) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "scope": scope,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_access_token(secret: str, token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(str(e)) from e


def bearer_token(authorization: Optional[str]) -> str:
    """Strip a case-insensitive "Bearer " prefix."""
    return _BEARER_PREFIX.sub("", authorization or "").strip()


def _client_ok(settings: Settings, client_id: str, client_secret: str) -> bool:
    if not client_id or not client_secret:
        return False
    return hmac.compare_digest(client_id.encode(), settings.client_id.encode()) and hmac.compare_digest(
        client_secret.encode(), settings.client_secret.encode()
    )


def exchange_token(
    settings: Settings,
    *,
    grant_type: str,
    client_id: str,
    client_secret: str,
    code: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Token endpoint logic. Raises OAuthError(invalid_client | invalid_grant |
    unsupported_grant_type).
    """
    if not _client_ok(settings, client_id, client_secret):
        raise OAuthError("invalid_client")

    if grant_type not in {"client_credentials", "authorization_code", "refresh_token"}:
        raise OAuthError("unsupported_grant_type")

    if grant_type == "authorization_code" and code != DEMO_AUTH_CODE:
        raise OAuthError("invalid_grant")

    out: Dict[str, Any] = {
        "token_type": "Bearer",
        "access_token": issue_access_token(settings.jwt_secret, client_id, settings.token_ttl_seconds),
        "expires_in": settings.token_ttl_seconds,
    }
    if grant_type == "authorization_code":
        out["refresh_token"] = DEMO_REFRESH_TOKEN
    return out


def authorize_redirect(redirect_uri: str, state: str) -> str:
    """Simulated consent: always approves and hands back the demo code."""
    return f"{redirect_uri}?code={quote(DEMO_AUTH_CODE, safe='')}&state={quote(state, safe='')}"
