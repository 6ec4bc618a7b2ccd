"""Utility functions."""
import uuid
from datetime import datetime


def generate_id() -> str:
    """Generate a UUID4 string for entity IDs."""
    return str(uuid.uuid4())


def iso(value: datetime | None) -> str | None:
    """Serialize an optional timestamp for JSON responses."""
    return value.isoformat() if value else None
