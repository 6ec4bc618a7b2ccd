"""Session registry: per-user allow-list of issued tokens.

A token is only accepted while its digest is listed here, which lets the
server revoke tokens that are still correctly signed and unexpired.
"""
import hashlib

from sqlalchemy.orm import Session

from blogapi.logging_config import get_logger
from blogapi.models import SessionToken
from blogapi.utils import generate_id

logger = get_logger("blogapi.sessions")


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionRegistry:
    """Allow-list operations bound to a database session."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, user_id: str, token: str | None = None):
        qry = self.db.query(SessionToken).filter(SessionToken.user_id == user_id)
        if token is not None:
            qry = qry.filter(SessionToken.token_hash == hash_token(token))
        return qry

    def register(self, user_id: str, token: str) -> None:
        """Add a token to the allow-list. Repeated logins keep every token valid."""
        self.db.add(SessionToken(id=generate_id(), user_id=user_id, token_hash=hash_token(token)))
        self.db.commit()

    def revoke(self, user_id: str, token: str) -> bool:
        """Remove exactly one matching entry. Returns whether anything was removed."""
        entry = self._query(user_id, token).first()
        if not entry:
            return False
        self.db.delete(entry)
        self.db.commit()
        return True

    def revoke_all(self, user_id: str, commit: bool = True) -> int:
        """Clear the allow-list, e.g. when the account is blocked."""
        removed = self._query(user_id).delete(synchronize_session=False)
        if commit:
            self.db.commit()
        logger.info("Revoked %d session(s) for user %s", removed, user_id)
        return removed

    def is_active(self, user_id: str, token: str) -> bool:
        return self._query(user_id, token).first() is not None

    def count(self, user_id: str) -> int:
        return self._query(user_id).count()
