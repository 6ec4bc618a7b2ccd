"""Common schemas."""
from pydantic import BaseModel


class LikeToggleResponse(BaseModel):
    message: str
    num_likes: int
    is_liked: bool


class AttendanceToggleResponse(BaseModel):
    attending: bool
    count: int
