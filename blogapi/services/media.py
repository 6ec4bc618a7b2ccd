"""
Media storage backed by the Cloudinary REST upload API.

Uploaded files are first staged under ``settings.upload_dir``; the staged
copy is always removed after the upload attempt, whether it succeeded or not.
"""
import hashlib
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import httpx
from fastapi import UploadFile

from blogapi.config import Settings, settings
from blogapi.logging_config import get_logger
from blogapi.services.errors import DependencyError, ValidationError
from blogapi.utils import generate_id

logger = get_logger("blogapi.media")

CLOUDINARY_API = "https://api.cloudinary.com/v1_1"
IMAGE_TYPES = {"image/jpeg": ".jpg", "image/jpg": ".jpg", "image/png": ".png"}
VIDEO_TYPES = {"video/mp4": ".mp4", "video/webm": ".webm", "video/quicktime": ".mov"}


@dataclass
class UploadResult:
    url: str
    public_id: str
    resource_type: str = "image"

    def as_media(self) -> dict:
        return {"url": self.url, "public_id": self.public_id}


class CloudinaryStorage:
    """Signed uploads and deletions against a Cloudinary account."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str, timeout: float = 30):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings) -> "CloudinaryStorage":
        return cls(
            cloud_name=config.cloudinary_cloud_name,
            api_key=config.cloudinary_api_key,
            api_secret=config.cloudinary_api_secret,
            folder=config.cloudinary_folder,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _sign(self, params: dict) -> str:
        to_sign = "&".join(f"{k}={v}" for k, v in sorted(params.items()) if v not in (None, ""))
        return hashlib.sha1((to_sign + self.api_secret).encode("utf-8")).hexdigest()

    def _signed(self, params: dict) -> dict:
        params = {**params, "timestamp": int(time.time())}
        return {**params, "api_key": self.api_key, "signature": self._sign(params)}

    def upload(self, path: str | Path) -> UploadResult:
        if not self.configured:
            raise DependencyError("Media storage is not configured")
        url = f"{CLOUDINARY_API}/{self.cloud_name}/auto/upload"
        try:
            with open(path, "rb") as fh:
                resp = httpx.post(
                    url,
                    data=self._signed({"folder": self.folder}),
                    files={"file": (Path(path).name, fh)},
                    timeout=self.timeout,
                )
        except (OSError, httpx.HTTPError) as e:
            logger.error("Upload of %s failed: %s", path, e)
            raise DependencyError(f"Image upload failed: {e}") from e
        if resp.status_code != 200:
            logger.error("Upload of %s rejected (%d): %s", path, resp.status_code, resp.text)
            raise DependencyError(f"Image upload failed with status {resp.status_code}")
        body = resp.json()
        return UploadResult(
            url=body["secure_url"],
            public_id=body["public_id"],
            resource_type=body.get("resource_type", "image"),
        )

    def delete(self, public_id: str | None, resource_type: str = "image") -> None:
        """Remove a stored asset. Failures are logged; the caller's mutation proceeds."""
        if not public_id or not self.configured:
            return
        url = f"{CLOUDINARY_API}/{self.cloud_name}/{resource_type}/destroy"
        try:
            resp = httpx.post(url, data=self._signed({"public_id": public_id}), timeout=self.timeout)
            if resp.status_code == 200:
                logger.info("Deleted media %s", public_id)
            else:
                logger.warning("Media delete for %s returned %d", public_id, resp.status_code)
        except httpx.HTTPError as e:
            logger.warning("Media delete for %s failed: %s", public_id, e)


@lru_cache
def get_media_storage() -> CloudinaryStorage:
    """Dependency returning the configured media storage."""
    return CloudinaryStorage.from_settings(settings)


def stage_upload(file: UploadFile, allowed_types: dict) -> Path:
    """Validate an uploaded file and write it to the staging directory."""
    ext = allowed_types.get(file.content_type or "")
    if not ext:
        raise ValidationError(f"Unsupported file type: {file.content_type}")
    data = file.file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise ValidationError("File exceeds the maximum upload size")
    staging = Path(settings.upload_dir)
    staging.mkdir(parents=True, exist_ok=True)
    path = staging / f"{Path(file.filename or 'upload').stem}-{generate_id()}{ext}"
    path.write_bytes(data)
    return path


def store_upload(storage, file: UploadFile, allowed_types: dict = IMAGE_TYPES) -> UploadResult:
    """Stage ``file``, push it to ``storage`` and always discard the staged copy."""
    path = stage_upload(file, allowed_types)
    try:
        result = storage.upload(path)
    finally:
        path.unlink(missing_ok=True)
    if file.content_type in VIDEO_TYPES:
        result.resource_type = "video"
    return result
