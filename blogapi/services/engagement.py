"""Engagement ledger: likes, attendance and comment counters.

Post likes, comment likes and event attendance are the same toggle over a
membership list, with an optional counter column and, for likes, the actor's
``liked_items`` index kept in step with the item's ``likes`` list.

The item and the user row are written in one transaction. When that commit
fails the session is rolled back and the pair is logged for manual
reconciliation before the error propagates.
"""
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blogapi.logging_config import get_logger
from blogapi.models import Comment, Event, Post, User
from blogapi.services.errors import (
    AttendanceDisabledError,
    NotFoundError,
    ValidationError,
)
from blogapi.utils import generate_id

logger = get_logger("blogapi.engagement")

ITEM_POST = "Post"
ITEM_COMMENT = "Comment"
ITEM_TYPES = (ITEM_POST, ITEM_COMMENT)


@dataclass
class ToggleResult:
    active: bool
    count: int


def _commit(db: Session, action: str, item_id: str, user_id: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(
            "Ledger write failed (%s item=%s user=%s); check likes/liked_items for reconciliation",
            action,
            item_id,
            user_id,
        )
        raise


def _without_entry(entries: list, item_id: str, item_type: str) -> list:
    return [
        e for e in (entries or [])
        if not (e.get("item_id") == item_id and e.get("item_type") == item_type)
    ]


def apply_toggle(
    actor: User,
    item,
    membership_field: str,
    counter_field: str | None = None,
    item_type: str | None = None,
) -> ToggleResult:
    """Flip the actor's membership on ``item`` in memory. The caller commits."""
    if item_type is not None and item_type not in ITEM_TYPES:
        raise ValidationError(f"Unknown item type: {item_type}")
    members = list(getattr(item, membership_field) or [])
    was_member = actor.id in members
    if was_member:
        members = [m for m in members if m != actor.id]
    else:
        members.append(actor.id)
    # Lists are reassigned so the JSON column is flagged dirty.
    setattr(item, membership_field, members)

    if counter_field:
        current = getattr(item, counter_field) or 0
        setattr(item, counter_field, max(0, current - 1) if was_member else current + 1)
        count = getattr(item, counter_field)
    else:
        count = len(members)

    if item_type:
        entries = _without_entry(actor.liked_items, item.id, item_type)
        if not was_member:
            entries.append({"item_id": item.id, "item_type": item_type})
        actor.liked_items = entries

    return ToggleResult(active=not was_member, count=count)


def toggle(
    db: Session,
    actor: User,
    item,
    membership_field: str,
    counter_field: str | None = None,
    item_type: str | None = None,
) -> ToggleResult:
    if item is None:
        raise NotFoundError()
    result = apply_toggle(actor, item, membership_field, counter_field, item_type)
    _commit(db, f"toggle {membership_field}", item.id, actor.id)
    return result


def toggle_post_like(db: Session, actor: User, post_id: str) -> ToggleResult:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return toggle(db, actor, post, "likes", counter_field="num_likes", item_type=ITEM_POST)


def toggle_comment_like(db: Session, actor: User, comment_id: str) -> ToggleResult:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment not found")
    return toggle(db, actor, comment, "likes", item_type=ITEM_COMMENT)


def toggle_attendance(db: Session, actor: User, event_id: str) -> ToggleResult:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    if not event.allows_attendance:
        raise AttendanceDisabledError()
    return toggle(db, actor, event, "attendees")


def add_comment(
    db: Session,
    actor: User,
    post: Post,
    content: str,
    parent_id: str | None = None,
) -> Comment:
    """Create a comment or reply and bump the post's comment counter together."""
    if parent_id:
        parent = db.query(Comment).filter(Comment.id == parent_id).first()
        if not parent or parent.post_id != post.id:
            raise NotFoundError("Parent comment not found on this post")
    comment = Comment(
        id=generate_id(),
        post_id=post.id,
        user_id=actor.id,
        parent_id=parent_id or None,
        content=content,
        likes=[],
    )
    db.add(comment)
    post.num_comments = (post.num_comments or 0) + 1
    _commit(db, "add comment", post.id, actor.id)
    db.refresh(comment)
    return comment


def forget_item(db: Session, item, item_type: str) -> None:
    """Drop ``item`` from the liked_items index of everyone who liked it. No commit."""
    for user_id in item.likes or []:
        user = db.query(User).filter(User.id == user_id).first()
        if user:
            user.liked_items = _without_entry(user.liked_items, item.id, item_type)


def purge_user(db: Session, user: User) -> None:
    """Remove every trace of ``user`` from likes and attendance lists. No commit."""
    for entry in user.liked_items or []:
        model = Post if entry.get("item_type") == ITEM_POST else Comment
        item = db.query(model).filter(model.id == entry.get("item_id")).first()
        if not item or user.id not in (item.likes or []):
            continue
        item.likes = [m for m in item.likes if m != user.id]
        if model is Post:
            item.num_likes = max(0, (item.num_likes or 0) - 1)
    user.liked_items = []

    for event in db.query(Event).all():
        if user.id in (event.attendees or []):
            event.attendees = [m for m in event.attendees if m != user.id]

    db.query(Comment).filter(Comment.user_id == user.id).update(
        {Comment.user_id: None}, synchronize_session=False
    )
