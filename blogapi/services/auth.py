"""Auth service: password hashing and session token issuance."""
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import bcrypt
from jose import JWTError, jwt

from blogapi.config import Settings, settings
from blogapi.services.errors import DependencyError, InvalidTokenError
from blogapi.utils import generate_id


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as e:
        # Stored digest is not a bcrypt hash
        raise DependencyError("Password verification failed") from e


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


class TokenAuthority:
    """Issues and verifies signed session tokens.

    Verification only checks signature and expiry. Whether the token is still
    allow-listed is a separate question answered by the session registry.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=365)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenAuthority":
        return cls(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            ttl=timedelta(days=config.token_ttl_days),
        )

    def issue(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.ttl,
            # Distinguishes tokens issued within the same second
            "jti": generate_id(),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError() from e
        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError()
        return user_id


@lru_cache
def get_token_authority() -> TokenAuthority:
    """Dependency returning the process-wide token authority."""
    return TokenAuthority.from_settings(settings)
