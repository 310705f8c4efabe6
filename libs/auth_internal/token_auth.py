import hmac
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InternalTokenAuth:
    """
    Shared-secret bearer token for trusted service-to-service callers.

    HTTP header:
    Authorization: Bearer <token>
    """

    token: Optional[str]

    def is_enabled(self) -> bool:
        return bool(self.token and self.token.strip())

    def verify_token(self, provided: Optional[str]) -> bool:
        if not self.is_enabled() or not provided:
            return False
        return hmac.compare_digest(provided.strip(), (self.token or "").strip())
