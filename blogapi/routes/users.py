"""User routes: own profile plus admin user management."""
from fastapi import APIRouter, Depends

from blogapi.database import get_db
from blogapi.logging_config import get_logger
from blogapi.models import User
from blogapi.schemas.user import LikedItemsResponse, UserUpdate
from blogapi.services.auth import get_password_hash
from blogapi.services.engagement import purge_user
from blogapi.services.errors import NotFoundError, ValidationError
from blogapi.services.sessions import SessionRegistry
from blogapi.middleware.auth import get_current_user_required, require_admin
from blogapi.routes.auth import ensure_unique
from blogapi.utils import iso

router = APIRouter(prefix="/users", tags=["users"])

logger = get_logger("blogapi.users")


def _user_to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "username": u.username,
        "email": u.email,
        "role": u.role,
        "is_blocked": u.is_blocked,
        "created_at": iso(u.created_at),
    }


def _get_user_or_404(db, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user_required)):
    return _user_to_dict(user)


@router.put("/profile")
def update_profile(
    data: UserUpdate,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    email = data.email.lower() if data.email else None
    ensure_unique(db, username=data.username, email=email, exclude_id=user.id)
    if data.username:
        user.username = data.username
    if email:
        user.email = email
    if data.password:
        user.hashed_password = get_password_hash(data.password)
    db.commit()
    db.refresh(user)
    return {**_user_to_dict(user), "message": "Profile updated"}


@router.get("/profile/likes", response_model=LikedItemsResponse)
def get_liked_items(user: User = Depends(get_current_user_required)):
    """Items the current user has liked, oldest first."""
    return {"data": list(user.liked_items or []), "total": len(user.liked_items or [])}


@router.get("")
def list_users(_: User = Depends(require_admin), db=Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc()).all()
    return [_user_to_dict(u) for u in users]


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db=Depends(get_db),
):
    user = _get_user_or_404(db, user_id)
    if user.is_admin:
        raise ValidationError("Administrators cannot be deleted")
    purge_user(db, user)
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return {"message": "User deleted"}


@router.put("/{user_id}/block")
def toggle_block_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db=Depends(get_db),
):
    user = _get_user_or_404(db, user_id)
    if user.is_admin:
        raise ValidationError("Administrators cannot be blocked")
    user.is_blocked = not user.is_blocked
    if user.is_blocked:
        SessionRegistry(db).revoke_all(user.id, commit=False)
    db.commit()
    logger.info("Admin %s %s user %s", admin.id, "blocked" if user.is_blocked else "unblocked", user.id)
    return {
        "message": "User blocked" if user.is_blocked else "User unblocked",
        "is_blocked": user.is_blocked,
    }
