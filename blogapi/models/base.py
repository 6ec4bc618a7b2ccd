"""Declarative base and shared column types."""
import json

from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator, TEXT

Base = declarative_base()


class JSONList(TypeDecorator):
    """Store Python list as JSON string.

    Values must be reassigned, not mutated in place, for changes to be flushed.
    """
    impl = TEXT
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            value = json.dumps(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            value = json.loads(value)
        return value or []
