"""Post routes."""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from blogapi.database import get_db
from blogapi.logging_config import get_logger
from blogapi.models import Post, User
from blogapi.schemas.common import LikeToggleResponse
from blogapi.services.engagement import ITEM_COMMENT, ITEM_POST, forget_item, toggle_post_like
from blogapi.services.errors import NotFoundError, ValidationError
from blogapi.services.media import get_media_storage, store_upload
from blogapi.middleware.auth import get_current_user, get_current_user_required, require_admin
from blogapi.utils import generate_id, iso

router = APIRouter(prefix="/posts", tags=["posts"])

logger = get_logger("blogapi.posts")

TITLE_MIN_LENGTH = 5
CONTENT_MIN_LENGTH = 20


def _post_to_dict(p: Post, current_user_id: str | None = None) -> dict:
    author = p.author
    d = {
        "id": p.id,
        "title": p.title,
        "content": p.content,
        "image_url": p.image_url,
        "author": {"id": author.id, "username": author.username, "role": author.role} if author else None,
        "likes": list(p.likes or []),
        "num_likes": p.num_likes,
        "num_comments": p.num_comments,
        "is_published": p.is_published,
        "is_pinned": p.is_pinned,
        "created_at": iso(p.created_at),
        "updated_at": iso(p.updated_at),
    }
    if current_user_id:
        d["is_liked"] = current_user_id in (p.likes or [])
    return d


def _clean_title(title: str) -> str:
    title = title.strip()
    if len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Title must be at least {TITLE_MIN_LENGTH} characters")
    return title


def _clean_content(content: str) -> str:
    if len(content.strip()) < CONTENT_MIN_LENGTH:
        raise ValidationError(f"Content must be at least {CONTENT_MIN_LENGTH} characters")
    return content


def get_post_or_404(db, post_id: str) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


@router.get("")
def list_posts(db=Depends(get_db)):
    """Published posts, pinned first, newest first."""
    posts = (
        db.query(Post)
        .filter(Post.is_published == True)  # noqa: E712
        .order_by(Post.is_pinned.desc(), Post.created_at.desc())
        .all()
    )
    return [_post_to_dict(p) for p in posts]


@router.get("/{post_id}")
def get_post(
    post_id: str,
    db=Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    post = get_post_or_404(db, post_id)
    if not post.is_published and not (current_user and current_user.is_admin):
        raise NotFoundError("Post not found")
    return _post_to_dict(post, current_user.id if current_user else None)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    title: str | None = Form(None),
    content: str | None = Form(None),
    is_published: bool = Form(True),
    is_pinned: bool = Form(False),
    image: UploadFile | None = File(None),
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    if not title or not content:
        raise ValidationError("Title and content are required")
    title = _clean_title(title)
    content = _clean_content(content)
    image_url = image_public_id = None
    if image is not None and image.filename:
        uploaded = store_upload(storage, image)
        image_url, image_public_id = uploaded.url, uploaded.public_id
    post = Post(
        id=generate_id(),
        author_id=user.id,
        title=title,
        content=content,
        image_url=image_url,
        image_public_id=image_public_id,
        likes=[],
        num_likes=0,
        num_comments=0,
        is_published=is_published,
        is_pinned=is_pinned,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Admin %s created post %s", user.id, post.id)
    return {"message": "Post created", "post": _post_to_dict(post)}


@router.put("/{post_id}")
def update_post(
    post_id: str,
    title: str | None = Form(None),
    content: str | None = Form(None),
    is_published: bool | None = Form(None),
    is_pinned: bool | None = Form(None),
    image: UploadFile | None = File(None),
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    post = get_post_or_404(db, post_id)
    if title is not None:
        post.title = _clean_title(title)
    if content is not None:
        post.content = _clean_content(content)
    if is_published is not None:
        post.is_published = is_published
    if is_pinned is not None:
        post.is_pinned = is_pinned
    if image is not None and image.filename:
        uploaded = store_upload(storage, image)
        storage.delete(post.image_public_id)
        post.image_url, post.image_public_id = uploaded.url, uploaded.public_id
    db.commit()
    db.refresh(post)
    return {"message": "Post updated", "post": _post_to_dict(post)}


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    post = get_post_or_404(db, post_id)
    storage.delete(post.image_public_id)
    for comment in post.comments:
        forget_item(db, comment, ITEM_COMMENT)
    forget_item(db, post, ITEM_POST)
    db.delete(post)
    db.commit()
    logger.info("Admin %s deleted post %s", user.id, post_id)
    return {"message": "Post deleted"}


@router.put("/{post_id}/like", response_model=LikeToggleResponse)
def like_post(
    post_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    """Like or unlike a post."""
    result = toggle_post_like(db, user, post_id)
    return {
        "message": "Like added" if result.active else "Like removed",
        "num_likes": result.count,
        "is_liked": result.active,
    }
