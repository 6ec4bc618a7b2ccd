"""Tests for the media storage client and staged uploads."""
import io
from pathlib import Path

import httpx
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from blogapi.config import settings
from blogapi.services import media
from blogapi.services.errors import DependencyError, ValidationError


def _upload_file(name="photo.png", content=b"png-bytes", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=name,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def cloudinary():
    return media.CloudinaryStorage(
        cloud_name="demo",
        api_key="key",
        api_secret="secret",
        folder="posts",
    )


class TestCloudinaryStorage:
    def test_signature_sorts_params_and_skips_empty(self, cloudinary):
        import hashlib

        expected = hashlib.sha1(b"folder=posts&timestamp=100secret").hexdigest()
        assert cloudinary._sign({"timestamp": 100, "folder": "posts", "eager": ""}) == expected

    def test_upload_posts_signed_request(self, cloudinary, tmp_path, monkeypatch):
        captured = {}

        def fake_post(url, data=None, files=None, timeout=None):
            captured["url"] = url
            captured["data"] = data
            captured["filename"] = files["file"][0]
            return httpx.Response(
                200,
                json={"secure_url": "https://res.test/a.png", "public_id": "posts/a", "resource_type": "image"},
            )

        monkeypatch.setattr(media.httpx, "post", fake_post)
        path = tmp_path / "a.png"
        path.write_bytes(b"png")

        result = cloudinary.upload(path)

        assert result.url == "https://res.test/a.png"
        assert result.public_id == "posts/a"
        assert captured["url"].endswith("/demo/auto/upload")
        assert captured["data"]["api_key"] == "key"
        assert captured["data"]["folder"] == "posts"
        assert "signature" in captured["data"]
        assert captured["filename"] == "a.png"

    def test_rejected_upload_is_a_dependency_error(self, cloudinary, tmp_path, monkeypatch):
        monkeypatch.setattr(media.httpx, "post", lambda *a, **kw: httpx.Response(401, text="bad key"))
        path = tmp_path / "a.png"
        path.write_bytes(b"png")
        with pytest.raises(DependencyError):
            cloudinary.upload(path)

    def test_network_failure_is_a_dependency_error(self, cloudinary, tmp_path, monkeypatch):
        def boom(*args, **kwargs):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(media.httpx, "post", boom)
        path = tmp_path / "a.png"
        path.write_bytes(b"png")
        with pytest.raises(DependencyError):
            cloudinary.upload(path)

    def test_unconfigured_storage_refuses_uploads(self, tmp_path):
        storage = media.CloudinaryStorage(cloud_name="", api_key="", api_secret="", folder="x")
        with pytest.raises(DependencyError):
            storage.upload(tmp_path / "missing.png")

    def test_delete_failure_does_not_raise(self, cloudinary, monkeypatch):
        def boom(*args, **kwargs):
            raise httpx.ReadTimeout("slow")

        monkeypatch.setattr(media.httpx, "post", boom)
        cloudinary.delete("posts/a")


class TestStoreUpload:
    class _Recorder:
        def __init__(self, fail=False):
            self.fail = fail
            self.paths = []

        def upload(self, path):
            self.paths.append(Path(path))
            if self.fail:
                raise DependencyError("down")
            return media.UploadResult(url="https://res.test/x", public_id="x")

    def test_staged_file_removed_after_success(self):
        storage = self._Recorder()
        result = media.store_upload(storage, _upload_file())
        assert result.public_id == "x"
        assert not storage.paths[0].exists()
        assert storage.paths[0].parent == Path(settings.upload_dir)

    def test_staged_file_removed_after_failure(self):
        storage = self._Recorder(fail=True)
        with pytest.raises(DependencyError):
            media.store_upload(storage, _upload_file())
        assert not storage.paths[0].exists()

    def test_video_uploads_are_tagged(self):
        storage = self._Recorder()
        result = media.store_upload(
            storage,
            _upload_file("clip.mp4", b"mp4", "video/mp4"),
            {**media.IMAGE_TYPES, **media.VIDEO_TYPES},
        )
        assert result.resource_type == "video"

    def test_oversized_file_is_rejected(self, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 4)
        storage = self._Recorder()
        with pytest.raises(ValidationError):
            media.store_upload(storage, _upload_file(content=b"12345"))
        assert storage.paths == []

    def test_disallowed_type_is_rejected(self):
        storage = self._Recorder()
        with pytest.raises(ValidationError):
            media.store_upload(storage, _upload_file("clip.mp4", b"mp4", "video/mp4"))
