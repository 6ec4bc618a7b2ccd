"""Seed script to populate demo content for development."""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from blogapi.database import SessionLocal, init_db
from blogapi.models import ROLE_ADMIN, Event, Post, User
from blogapi.services.auth import get_password_hash
from blogapi.services.seed_admin import seed_admin_user
from blogapi.utils import generate_id


def seed():
    init_db()
    seed_admin_user()
    db = SessionLocal()
    try:
        if db.query(Post).first():
            print("Database already seeded.")
            return
        admin = db.query(User).filter(User.role == ROLE_ADMIN).first()
        if not admin:
            print("No admin account; set ADMIN_EMAIL and ADMIN_PASSWORD first.")
            return
        reader = User(
            id=generate_id(),
            username="demo_reader",
            email="reader@example.com",
            hashed_password=get_password_hash("demo123"),
        )
        db.add(reader)
        posts = [
            ("Welcome to the community", "A place to share reading notes, meetups and everything in between.", True),
            ("This month's reading list", "Three novels and an essay collection to get through before the next meetup.", False),
        ]
        for title, content, pinned in posts:
            db.add(Post(
                id=generate_id(),
                author_id=admin.id,
                title=title,
                content=content,
                likes=[],
                num_likes=0,
                num_comments=0,
                is_published=True,
                is_pinned=pinned,
            ))
        db.add(Event(
            id=generate_id(),
            title="Monthly book club",
            description="We discuss this month's reading list over coffee.",
            date=datetime.now(timezone.utc) + timedelta(days=14),
            location="Central library, room 2",
            images=[],
            videos=[],
            allows_attendance=True,
            attendees=[],
            created_by=admin.id,
        ))
        db.commit()
        print("Seed complete. Reader: reader@example.com / demo123")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
