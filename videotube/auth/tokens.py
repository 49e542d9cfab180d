"""JWT signing and verification."""

import uuid
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from videotube.constants import TOKEN_ALGORITHM


class TokenError(Exception):
    """Token could not be verified (bad signature, expired, malformed)."""


class TokenSigner:
    """Sign and verify HS256 tokens.

    Every token carries a random ``jti`` so two tokens issued for the same
    user within the same second are still distinct values.
    """

    def __init__(self, algorithm: str = TOKEN_ALGORITHM) -> None:
        self.algorithm = algorithm

    def sign(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = datetime.now(UTC)
        to_encode = {
            **claims,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(to_encode, secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: str) -> dict[str, Any]:
        """Return the token's claims or raise TokenError."""
        try:
            return jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenError("Token has expired") from e
        except JWTError as e:
            raise TokenError("Invalid token") from e


@lru_cache
def get_token_signer() -> TokenSigner:
    """Get the application token signer."""
    return TokenSigner()
