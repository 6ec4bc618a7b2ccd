"""Seed admin user on startup."""
from blogapi.config import settings
from blogapi.database import SessionLocal
from blogapi.logging_config import get_logger
from blogapi.models import User, ROLE_ADMIN
from blogapi.services.auth import get_password_hash
from blogapi.utils import generate_id

logger = get_logger("blogapi.seed_admin")


def seed_admin_user() -> bool:
    """Ensure the configured admin exists with the admin role. Returns False when not configured."""
    if not (settings.admin_email and settings.admin_username and settings.admin_password):
        return False
    email = settings.admin_email.lower()
    db = SessionLocal()
    try:
        user = (
            db.query(User)
            .filter((User.email == email) | (User.username == settings.admin_username))
            .first()
        )
        if user:
            if user.role != ROLE_ADMIN:
                user.role = ROLE_ADMIN
                db.commit()
                logger.info("Promoted existing user %s to admin", user.id)
            return True
        user = User(
            id=generate_id(),
            email=email,
            username=settings.admin_username,
            hashed_password=get_password_hash(settings.admin_password),
            role=ROLE_ADMIN,
            liked_items=[],
        )
        db.add(user)
        db.commit()
        logger.info("Created admin user %s", user.id)
        return True
    finally:
        db.close()
