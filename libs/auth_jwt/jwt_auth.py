"""
JWT Authentication.

Verifies bearer tokens issued by the account service. Two modes:
- HS256 (or another HMAC algorithm) with a shared secret
- RS256 with signing keys fetched from a JWKS endpoint
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from jwt import PyJWKClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JWTAuthConfig:
    """Configuration for JWT verification."""

    # Shared secret for HMAC-signed tokens
    secret: str = ""
    algorithm: str = "HS256"

    # JWKS URL for RSA-signed tokens; takes precedence over `secret`
    jwks_url: str = ""

    # Cache JWKS keys (seconds)
    jwks_cache_seconds: int = 300


class JWTAuth:
    """Validates JWTs and exposes the subject (username) claim."""

    def __init__(self, config: JWTAuthConfig):
        self.config = config
        self._jwks_client: Optional[PyJWKClient] = None

        if config.jwks_url:
            self._jwks_client = PyJWKClient(
                config.jwks_url,
                cache_jwk_set=True,
                lifespan=config.jwks_cache_seconds,
            )
            logger.info("JWKS client initialized: %s", config.jwks_url)

    def is_enabled(self) -> bool:
        return self._jwks_client is not None or bool(self.config.secret)

    def verify_token(self, token: str) -> Optional[dict]:
        """
        Verify a JWT.

        Args:
            token: raw JWT without the "Bearer " prefix

        Returns:
            The decoded payload, or None when the token is invalid or expired.
        """
        if not self.is_enabled() or not token:
            return None

        try:
            if self._jwks_client is not None:
                key = self._jwks_client.get_signing_key_from_jwt(token).key
                algorithms = ["RS256"]
            else:
                key = self.config.secret
                algorithms = [self.config.algorithm]

            payload = jwt.decode(
                token,
                key,
                algorithms=algorithms,
                options={
                    "require": ["sub"],
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_aud": False,
                },
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT expired")
            return None
        except jwt.PyJWKClientError as e:
            logger.error("JWKS key lookup failed: %s", e)
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("JWT invalid: %s", e)
            return None

        logger.debug("JWT verified: sub=%s", payload.get("sub"))
        return payload

    def get_subject(self, token: str) -> Optional[str]:
        payload = self.verify_token(token)
        if payload:
            return str(payload.get("sub") or "") or None
        return None
