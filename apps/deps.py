"""
Dependencies for FastAPI.

Resolves the authenticated caller identity for the ingredient endpoints.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from libs.auth_internal.token_auth import InternalTokenAuth
from libs.auth_jwt import JWTAuth, JWTAuthConfig
from apps.settings import BackendSettings

logger = logging.getLogger(__name__)

# Declared as a security scheme so Swagger UI shows the Authorize button.
# auto_error=False lets unauthenticated requests reach our own checks.
http_bearer = HTTPBearer(auto_error=False)


def _header_user_id(x_user_id: Optional[str]) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing X-User-ID header",
        )
    return user_id


def require_user(settings: BackendSettings):
    """
    Dependency generator resolving the caller's user id.

    Order:
    1. Internal token matches -> trusted service call, identity from X-User-ID
    2. Otherwise the bearer token must be a valid JWT -> identity from `sub`
    3. Nothing configured at all -> local development, X-User-ID is trusted
    4. Anything else -> 401
    """
    internal_auth = InternalTokenAuth(token=settings.internal_token)
    jwt_auth = JWTAuth(
        JWTAuthConfig(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            jwks_url=settings.jwt_jwks_url,
        )
    )

    async def _dep(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
        x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
    ) -> str:
        token = credentials.credentials if credentials else None

        if not internal_auth.is_enabled() and not jwt_auth.is_enabled():
            logger.warning("No authentication configured, trusting X-User-ID header")
            return _header_user_id(x_user_id)

        if internal_auth.verify_token(token):
            logger.debug("Request authenticated via internal token")
            return _header_user_id(x_user_id)

        if token and jwt_auth.is_enabled():
            subject = jwt_auth.get_subject(token)
            if subject:
                return subject

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: invalid token or not logged in",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _dep
