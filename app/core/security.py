"""Identity token verification.

Bearer tokens are issued by the identity provider and carry the user's uid
in the ``sub`` claim. The API only verifies them; ``issue_token`` exists for
local development scripts and tests.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from app.config import Settings
from app.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity."""

    uid: str
    email: str | None = None
    phone_number: str | None = None
    email_verified: bool = False


class JwtIdentityProvider:
    """Verify identity tokens signed with a shared secret."""

    def __init__(self, settings: Settings):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.audience = settings.jwt_audience
        self.expire_minutes = settings.identity_token_expire_minutes

    def verify(self, token: str) -> Identity:
        """Decode a token and return the identity it asserts.

        Raises:
            AuthenticationError: with a sub-reason for expired, malformed
                or otherwise invalid tokens
        """
        options = {"verify_aud": self.audience is not None}
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options,
            )
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTClaimsError as e:
            raise AuthenticationError(f"Token claims are invalid: {e}")
        except JWTError as e:
            logger.info(f"Rejected malformed token: {e}")
            raise AuthenticationError("Token is malformed or invalid")

        uid = payload.get("sub")
        if not uid:
            raise AuthenticationError("Token payload is missing the subject")

        return Identity(
            uid=str(uid),
            email=payload.get("email"),
            phone_number=payload.get("phone_number"),
            email_verified=bool(payload.get("email_verified", False)),
        )

    def issue_token(
        self,
        uid: str,
        claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed identity token for ``uid``."""
        to_encode = dict(claims or {})
        expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode.update({"sub": uid, "exp": expire, "iat": datetime.now(UTC)})
        if self.audience:
            to_encode["aud"] = self.audience
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
