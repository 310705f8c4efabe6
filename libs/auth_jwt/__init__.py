"""
JWT Authentication Library.

Provides bearer JWT verification for end-user requests.
"""

from .jwt_auth import JWTAuth, JWTAuthConfig

__all__ = ["JWTAuth", "JWTAuthConfig"]
