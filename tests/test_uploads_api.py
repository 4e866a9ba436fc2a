"""
Tests for single-image upload and storage diagnostics.
"""
import io

import pytest
from PIL import Image

from conftest import blob_url, make_image_bytes
from portfolio.config import settings

pytestmark = pytest.mark.integration


async def test_upload_returns_public_url(admin_client, object_store):
    response = await admin_client.post(
        "/api/upload",
        files={"image": ("painting.jpg", make_image_bytes("JPEG"), "image/jpeg")},
    )

    assert response.status_code == 200
    assert response.json() == {"imageUrl": blob_url(object_store.uploaded[0])}
    stored = Image.open(io.BytesIO(object_store.blobs[object_store.uploaded[0]]))
    assert stored.format == "JPEG"


async def test_upload_keeps_png_format(admin_client, object_store):
    await admin_client.post(
        "/api/upload",
        files={"image": ("sketch.png", make_image_bytes("PNG", mode="RGBA"), "image/png")},
    )

    stored = Image.open(io.BytesIO(object_store.blobs[object_store.uploaded[0]]))
    assert stored.format == "PNG"


async def test_upload_stores_other_formats_unchanged(admin_client, object_store):
    original = make_image_bytes("GIF")

    await admin_client.post("/api/upload", files={"image": ("anim.gif", original, "image/gif")})

    assert object_store.blobs[object_store.uploaded[0]] == original


async def test_upload_rejects_non_image(admin_client, object_store):
    response = await admin_client.post(
        "/api/upload",
        files={"image": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_file_type"
    assert object_store.uploaded == []


async def test_upload_rejects_oversize_file(admin_client, object_store, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 100)

    response = await admin_client.post(
        "/api/upload",
        files={"image": ("big.jpg", b"\xff\xd8\xff" + b"0" * 200, "image/jpeg")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "file_too_large"
    assert object_store.uploaded == []


async def test_upload_without_file(admin_client):
    response = await admin_client.post("/api/upload")
    assert response.status_code == 400
    assert response.json()["error"] == "no_file"


async def test_upload_failure_is_500(admin_client, object_store):
    object_store.fail_upload_on_call = 1

    response = await admin_client.post(
        "/api/upload",
        files={"image": ("painting.jpg", make_image_bytes("JPEG"), "image/jpeg")},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "upload_failed", "detail": "Image upload failed"}


async def test_upload_requires_admin(client, object_store):
    response = await client.post(
        "/api/upload",
        files={"image": ("painting.jpg", make_image_bytes("JPEG"), "image/jpeg")},
    )
    assert response.status_code == 401
    assert object_store.uploaded == []


async def test_storage_diagnostics_hide_values(admin_client, monkeypatch):
    monkeypatch.setattr(settings, "CLOUDINARY_API_KEY", "key")
    monkeypatch.setattr(settings, "CLOUDINARY_API_SECRET", "")

    body = (await admin_client.get("/api/storage/diagnostics")).json()

    assert body["storageConfigured"] is False
    assert body["hasStorageEnv"] == {
        "CLOUDINARY_CLOUD_NAME": True,
        "CLOUDINARY_API_KEY": True,
        "CLOUDINARY_API_SECRET": False,
    }
    assert body["uploadStrategy"] == "cloudinary"
    assert "key" not in body.values()
