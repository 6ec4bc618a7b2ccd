"""Event routes."""
from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from blogapi.database import get_db
from blogapi.logging_config import get_logger
from blogapi.models import Event, User
from blogapi.schemas.common import AttendanceToggleResponse
from blogapi.services.engagement import toggle_attendance
from blogapi.services.errors import NotFoundError, ValidationError
from blogapi.services.media import IMAGE_TYPES, VIDEO_TYPES, get_media_storage, store_upload
from blogapi.middleware.auth import get_current_user_required, require_admin
from blogapi.utils import generate_id, iso

router = APIRouter(prefix="/events", tags=["events"])

logger = get_logger("blogapi.events")

MAX_MEDIA_FILES = 5
MEDIA_TYPES = {**IMAGE_TYPES, **VIDEO_TYPES}


def _event_to_dict(e: Event) -> dict:
    return {
        "id": e.id,
        "title": e.title,
        "description": e.description,
        "date": iso(e.date),
        "location": e.location,
        "images": list(e.images or []),
        "videos": list(e.videos or []),
        "allows_attendance": e.allows_attendance,
        "attendees": list(e.attendees or []),
        "attendees_count": len(e.attendees or []),
        "created_by": e.created_by,
        "created_at": iso(e.created_at),
    }


def _upload_media(storage, event: Event, media: list[UploadFile]) -> None:
    files = [f for f in media or [] if f.filename]
    if len(files) > MAX_MEDIA_FILES:
        raise ValidationError(f"At most {MAX_MEDIA_FILES} media files per request")
    images = list(event.images or [])
    videos = list(event.videos or [])
    for f in files:
        uploaded = store_upload(storage, f, MEDIA_TYPES)
        if uploaded.resource_type == "video":
            videos.append(uploaded.as_media())
        else:
            images.append(uploaded.as_media())
    event.images = images
    event.videos = videos


def _get_event_or_404(db, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


@router.get("")
def list_events(db=Depends(get_db)):
    """All events, soonest first."""
    events = db.query(Event).order_by(Event.date.asc()).all()
    return [_event_to_dict(e) for e in events]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    title: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    date: datetime = Form(...),
    location: str = Form(..., min_length=1),
    allows_attendance: bool = Form(False),
    media: list[UploadFile] = File(default=[]),
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    event = Event(
        id=generate_id(),
        title=title.strip(),
        description=description,
        date=date,
        location=location.strip(),
        allows_attendance=allows_attendance,
        images=[],
        videos=[],
        attendees=[],
        created_by=user.id,
    )
    _upload_media(storage, event, media)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Admin %s created event %s", user.id, event.id)
    return _event_to_dict(event)


@router.put("/{event_id}")
def update_event(
    event_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    date: datetime | None = Form(None),
    location: str | None = Form(None),
    allows_attendance: bool | None = Form(None),
    media: list[UploadFile] = File(default=[]),
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    event = _get_event_or_404(db, event_id)
    if title:
        event.title = title.strip()
    if description:
        event.description = description
    if date is not None:
        event.date = date
    if location:
        event.location = location.strip()
    if allows_attendance is not None:
        event.allows_attendance = allows_attendance
    _upload_media(storage, event, media)
    db.commit()
    db.refresh(event)
    return _event_to_dict(event)


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    user: User = Depends(require_admin),
    db=Depends(get_db),
    storage=Depends(get_media_storage),
):
    event = _get_event_or_404(db, event_id)
    for item in event.images or []:
        storage.delete(item.get("public_id"))
    for item in event.videos or []:
        storage.delete(item.get("public_id"), resource_type="video")
    db.delete(event)
    db.commit()
    logger.info("Admin %s deleted event %s", user.id, event_id)
    return {"message": "Event and media deleted"}


@router.post("/{event_id}/attend", response_model=AttendanceToggleResponse)
def attend_event(
    event_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    """Confirm or withdraw attendance."""
    result = toggle_attendance(db, user, event_id)
    return {"attending": result.active, "count": result.count}
