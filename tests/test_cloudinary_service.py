"""
Tests for the object storage gateway helpers.
"""
import logging

import pytest
from cloudinary.exceptions import Error as CloudinaryError

from conftest import blob_url
from portfolio.services import cloudinary_service


def test_extract_public_id_with_version():
    url = "https://res.cloudinary.com/demo/image/upload/v1712345678/portfolio/abc123.jpg"
    assert cloudinary_service.extract_public_id_from_url(url) == "portfolio/abc123"


def test_extract_public_id_without_version():
    url = "https://res.cloudinary.com/demo/image/upload/sample.png"
    assert cloudinary_service.extract_public_id_from_url(url) == "sample"


def test_extract_public_id_rejects_foreign_url():
    with pytest.raises(ValueError):
        cloudinary_service.extract_public_id_from_url("https://example.com/picture.jpg")


def test_is_managed_url():
    assert cloudinary_service.is_managed_url(blob_url("portfolio/x"))
    assert not cloudinary_service.is_managed_url("https://res.cloudinary.com/other/image/upload/v1/x.jpg")
    assert not cloudinary_service.is_managed_url("/images/local.jpg")
    assert not cloudinary_service.is_managed_url(None)


async def test_delete_by_url_skips_unmanaged(object_store):
    result = await cloudinary_service.delete_image_by_url("https://example.com/a.jpg")
    assert result is None
    assert object_store.deleted == []


async def test_delete_by_url_uses_public_id(object_store):
    await cloudinary_service.delete_image_by_url(blob_url("portfolio/abc"))
    assert object_store.deleted == ["portfolio/abc"]


async def test_best_effort_delete_records_orphan(object_store, caplog):
    object_store.fail_deletes = True
    url = blob_url("portfolio/stuck")

    with caplog.at_level(logging.WARNING, logger="portfolio.orphaned_blobs"):
        ok = await cloudinary_service.delete_image_best_effort(url, "artwork 1")

    assert ok is False
    orphan_records = [r for r in caplog.records if r.name == "portfolio.orphaned_blobs"]
    assert len(orphan_records) == 1
    assert url in orphan_records[0].getMessage()


async def test_upload_wraps_sdk_in_thread(monkeypatch):
    calls = []

    def fake_upload(file, **options):
        calls.append(options)
        return {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/portfolio/x.jpg",
            "public_id": "portfolio/x",
            "format": "jpg",
            "width": 10,
            "height": 10,
            "bytes": 3,
        }

    monkeypatch.setattr(cloudinary_service.cloudinary.uploader, "upload", fake_upload)
    result = await cloudinary_service.upload_image(b"abc", public_id="x")

    assert result["url"].endswith("portfolio/x.jpg")
    assert calls[0]["folder"] == "portfolio"
    assert calls[0]["public_id"] == "x"


async def test_upload_raises_after_failure(monkeypatch):
    def failing_upload(file, **options):
        raise CloudinaryError("boom")

    monkeypatch.setattr(cloudinary_service.cloudinary.uploader, "upload", failing_upload)
    with pytest.raises(CloudinaryError):
        await cloudinary_service.upload_image(b"abc", max_retries=1)
