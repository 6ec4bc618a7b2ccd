"""Auth schemas."""
from pydantic import BaseModel, EmailStr, Field, field_validator

USERNAME_MIN_LENGTH = 3


def clean_username(v: str | None) -> str | None:
    """Strip surrounding whitespace and re-check the minimum length."""
    if v is None:
        return None
    v = v.strip()
    if len(v) < USERNAME_MIN_LENGTH:
        raise ValueError(f"username must be at least {USERNAME_MIN_LENGTH} characters")
    return v


class RegisterRequest(BaseModel):
    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=64)
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return clean_username(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    token: str
    token_type: str = "bearer"
    message: str | None = None
