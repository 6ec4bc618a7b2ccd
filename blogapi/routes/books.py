"""Book routes."""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from blogapi.database import get_db
from blogapi.logging_config import get_logger
from blogapi.models import Book, User
from blogapi.services.errors import NotFoundError, ValidationError
from blogapi.services.media import get_media_storage, store_upload
from blogapi.middleware.auth import require_admin
from blogapi.utils import generate_id, iso

router = APIRouter(prefix="/books", tags=["books"])

logger = get_logger("blogapi.books")


def _book_to_dict(b: Book) -> dict:
    return {
        "id": b.id,
        "title": b.title,
        "description": b.description,
        "image_url": b.image_url,
        "link": b.link,
        "author_id": b.author_id,
        "created_at": iso(b.created_at),
    }


def _get_book_or_404(db, book_id: str) -> Book:
    book = db.query(Book).filter(Book.id == book_id).first()
    if not book:
        raise NotFoundError("Book not found")
    return book


@router.get("")
def list_books(db=Depends(get_db)):
    books = db.query(Book).order_by(Book.created_at.desc()).all()
    return [_book_to_dict(b) for b in books]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_book(
    title: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    link: str = Form(..., min_length=1),
    image: UploadFile | None = File(None),
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    if image is None or not image.filename:
        raise ValidationError("Please select an image file for the book")
    uploaded = store_upload(storage, image)
    book = Book(
        id=generate_id(),
        title=title.strip(),
        description=description,
        link=link.strip(),
        image_url=uploaded.url,
        image_public_id=uploaded.public_id,
        author_id=user.id,
    )
    db.add(book)
    db.commit()
    db.refresh(book)
    logger.info("Admin %s created book %s", user.id, book.id)
    return _book_to_dict(book)


@router.put("/{book_id}")
def update_book(
    book_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    link: str | None = Form(None),
    image: UploadFile | None = File(None),
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    book = _get_book_or_404(db, book_id)
    if title:
        book.title = title.strip()
    if description:
        book.description = description
    if link:
        book.link = link.strip()
    if image is not None and image.filename:
        uploaded = store_upload(storage, image)
        storage.delete(book.image_public_id)
        book.image_url, book.image_public_id = uploaded.url, uploaded.public_id
    db.commit()
    db.refresh(book)
    return _book_to_dict(book)


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    book = _get_book_or_404(db, book_id)
    storage.delete(book.image_public_id)
    db.delete(book)
    db.commit()
    logger.info("Admin %s deleted book %s", user.id, book_id)
    return {"message": "Book deleted"}
