"""
Bearer token verification for the external identity provider.

Tokens are issued elsewhere; this service only verifies them and reads the
caller's id, display name and role from the claims.
"""

from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from riding_club.core.config import get_settings
from riding_club.core.logging import get_logger

logger = get_logger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Requester:
    user_id: str
    display_name: str
    is_admin: bool = False

    @property
    def role(self) -> str:
        return "admin" if self.is_admin else "member"


def decode_token(token: str) -> dict:
    settings = get_settings()
    options = {"require": ["sub"]}
    kwargs = {}
    if settings.JWT_AUDIENCE:
        kwargs["audience"] = settings.JWT_AUDIENCE
    else:
        options["verify_aud"] = False
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options=options,
        **kwargs,
    )


def requester_from_claims(claims: dict) -> Requester:
    settings = get_settings()
    email = claims.get("email") or ""
    display_name = claims.get("name") or email.split("@")[0] or "Unknown member"
    return Requester(
        user_id=str(claims["sub"]),
        display_name=display_name,
        is_admin=claims.get("role") == settings.ADMIN_ROLE,
    )


async def get_current_requester(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Requester:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("token_rejected", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return requester_from_claims(claims)


async def require_admin(requester: Requester = Depends(get_current_requester)) -> Requester:
    if not requester.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return requester
