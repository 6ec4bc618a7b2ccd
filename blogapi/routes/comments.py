"""Comment routes, nested under posts."""
from fastapi import APIRouter, Depends, status

from blogapi.database import get_db
from blogapi.models import Comment, User
from blogapi.schemas.comment import CommentCreate
from blogapi.schemas.common import LikeToggleResponse
from blogapi.services.engagement import add_comment, toggle_comment_like
from blogapi.middleware.auth import get_current_user_required
from blogapi.routes.posts import get_post_or_404
from blogapi.utils import iso

router = APIRouter(prefix="/posts", tags=["comments"])


def _comment_to_dict(c: Comment) -> dict:
    parent_author = None
    if c.parent is not None and c.parent.user is not None:
        parent_author = {"id": c.parent.user.id, "username": c.parent.user.username}
    return {
        "id": c.id,
        "post_id": c.post_id,
        "user": {"id": c.user.id, "username": c.user.username} if c.user else None,
        "content": c.content,
        "parent_id": c.parent_id,
        "parent_author": parent_author,
        "likes": list(c.likes or []),
        "num_likes": len(c.likes or []),
        "created_at": iso(c.created_at),
    }


@router.get("/{post_id}/comments")
def list_comments(post_id: str, db=Depends(get_db)):
    """Comments and replies on a post, newest first."""
    get_post_or_404(db, post_id)
    comments = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc())
        .all()
    )
    return [_comment_to_dict(c) for c in comments]


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: str,
    data: CommentCreate,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    post = get_post_or_404(db, post_id)
    comment = add_comment(db, user, post, data.content, parent_id=data.parent_id)
    return _comment_to_dict(comment)


@router.put("/comments/{comment_id}/like", response_model=LikeToggleResponse)
def like_comment(
    comment_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    result = toggle_comment_like(db, user, comment_id)
    return {
        "message": "Like added" if result.active else "Like removed",
        "num_likes": result.count,
        "is_liked": result.active,
    }
