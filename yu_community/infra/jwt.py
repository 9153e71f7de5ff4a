"""HS256 access tokens for administrator sessions.

A token names an administrator and one of their sessions. It never carries a
role or club; those are looked up server-side on every request.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import jwt
from jwt import InvalidTokenError

from yu_community.settings import settings

ALGORITHM = "HS256"
ISSUER = "yu-community-api"
AUDIENCE = "yu-community-app"
LEEWAY_SECONDS = 5


@dataclass(frozen=True)
class AccessClaims:
    admin_id: str
    session_id: str
    issued_at: int
    expires_at: int


def issue_access_token(admin_id: str, session_id: str, *, ttl_minutes: Optional[int] = None) -> str:
    issued_at = int(time.time())
    ttl = settings.access_ttl_minutes if ttl_minutes is None else ttl_minutes
    claims = {
        "iss": ISSUER,
        "aud": AUDIENCE,
        "sub": admin_id,
        "sid": session_id,
        "iat": issued_at,
        "exp": issued_at + ttl * 60,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def read_access_token(token: str) -> AccessClaims:
    """Verify signature, issuer, audience and expiry.

    Raises ``jwt.InvalidTokenError`` (or a subclass) when any check fails.
    """
    claims = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[ALGORITHM],
        audience=AUDIENCE,
        issuer=ISSUER,
        leeway=LEEWAY_SECONDS,
        options={"require": ["exp", "iat", "iss", "aud", "sub", "sid"]},
    )
    if not claims["sub"] or not claims["sid"]:
        raise InvalidTokenError("empty subject or session")
    return AccessClaims(
        admin_id=str(claims["sub"]),
        session_id=str(claims["sid"]),
        issued_at=int(claims["iat"]),
        expires_at=int(claims["exp"]),
    )
