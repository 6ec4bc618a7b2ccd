"""User schemas."""
from pydantic import BaseModel, EmailStr, Field, field_validator

from blogapi.schemas.auth import USERNAME_MIN_LENGTH, clean_username


class UserUpdate(BaseModel):
    username: str | None = Field(None, min_length=USERNAME_MIN_LENGTH, max_length=64)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=6)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        return clean_username(v)


class LikedItem(BaseModel):
    item_id: str
    item_type: str


class LikedItemsResponse(BaseModel):
    data: list[LikedItem]
    total: int
