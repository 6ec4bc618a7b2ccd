"""Auth routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError

from blogapi.database import get_db
from blogapi.logging_config import get_logger
from blogapi.models import User, ROLE_USER
from blogapi.schemas.auth import RegisterRequest, LoginRequest, LoginResponse
from blogapi.services.auth import (
    TokenAuthority,
    get_password_hash,
    get_token_authority,
    verify_password,
)
from blogapi.services.errors import (
    AccountBlockedError,
    ConflictError,
    InvalidCredentialsError,
    TokenNotActiveError,
    ValidationError,
)
from blogapi.services.sessions import SessionRegistry
from blogapi.middleware.auth import get_bearer_token, get_current_user_required
from blogapi.utils import generate_id, iso

router = APIRouter(prefix="/auth", tags=["auth"])

logger = get_logger("blogapi.auth")


def ensure_unique(db, username: str | None = None, email: str | None = None, exclude_id: str | None = None) -> None:
    """Raise ConflictError when the username or email already belongs to another user."""
    if email is not None:
        qry = db.query(User).filter(User.email == email)
        if exclude_id:
            qry = qry.filter(User.id != exclude_id)
        if qry.first():
            raise ConflictError("Email already registered")
    if username is not None:
        qry = db.query(User).filter(User.username == username)
        if exclude_id:
            qry = qry.filter(User.id != exclude_id)
        if qry.first():
            raise ConflictError("Username already taken")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db=Depends(get_db)):
    if data.password != data.confirm_password:
        raise ValidationError("Passwords do not match")
    email = data.email.lower()
    ensure_unique(db, username=data.username, email=email)
    user = User(
        id=generate_id(),
        username=data.username,
        email=email,
        hashed_password=get_password_hash(data.password),
        role=ROLE_USER,
        liked_items=[],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration
        db.rollback()
        raise ConflictError("Username or email already registered") from e
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.username, user.id)
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "created_at": iso(user.created_at),
        "message": "User registered successfully",
    }


@router.post("/login")
def login(
    data: LoginRequest,
    db=Depends(get_db),
    authority: TokenAuthority = Depends(get_token_authority),
):
    user = db.query(User).filter(User.email == data.email.lower()).first()
    if not user or not verify_password(data.password, user.hashed_password):
        raise InvalidCredentialsError()
    if user.is_blocked:
        raise AccountBlockedError()
    token = authority.issue(user.id)
    SessionRegistry(db).register(user.id, token)
    logger.info("User %s logged in", user.id)
    return LoginResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        token=token,
        message=f"Welcome {user.username}",
    )


@router.delete("/logout")
def logout(
    token: str = Depends(get_bearer_token),
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    if not SessionRegistry(db).revoke(user.id, token):
        raise TokenNotActiveError()
    logger.info("User %s logged out", user.id)
    return {"message": "Session closed and token revoked"}


@router.get("/me")
def me(user: User = Depends(get_current_user_required)):
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "is_blocked": user.is_blocked,
        "created_at": iso(user.created_at),
    }
