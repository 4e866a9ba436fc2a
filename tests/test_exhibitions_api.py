"""
Tests for the exhibition endpoints.
"""
import pytest

from conftest import blob_url
from portfolio.repository import PortfolioRepository

pytestmark = pytest.mark.integration


def exhibition_payload(**overrides):
    payload = {
        "title": "Lumières du Sud",
        "location": "Galerie du Port, Marseille",
        "year": "2024",
        "imageUrl": blob_url("portfolio/poster"),
        "description": "Paysages méditerranéens",
    }
    payload.update(overrides)
    return payload


async def test_unauthenticated_delete_is_rejected(client, store, make_exhibition, object_store):
    exhibition = await make_exhibition()

    response = await client.delete(f"/api/exhibitions/{exhibition.id}")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
    assert await store("get_exhibition", exhibition.id) is not None
    assert object_store.deleted == []


async def test_list_is_public_and_ordered(client, make_exhibition):
    later = await make_exhibition(title="Later", order=5)
    earlier = await make_exhibition(title="Earlier", order=1)

    response = await client.get("/api/exhibitions")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    assert [e["id"] for e in response.json()] == [earlier.id, later.id]


async def test_get_single_exhibition_is_admin_only(client, make_exhibition):
    exhibition = await make_exhibition()
    assert (await client.get(f"/api/exhibitions/{exhibition.id}")).status_code == 401


async def test_get_missing_exhibition(admin_client):
    response = await admin_client.get("/api/exhibitions/5")
    assert response.status_code == 404


async def test_create_exhibition(admin_client, store):
    gallery = [{"url": blob_url("portfolio/g1"), "caption": "Vue de salle"}]

    response = await admin_client.post(
        "/api/exhibitions",
        json=exhibition_payload(galleryImages=gallery, videoUrl="https://video.example/x"),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["galleryImages"] == gallery
    assert body["videoUrl"] == "https://video.example/x"
    assert body["theme"] is None
    stored = await store("get_exhibition", body["id"])
    assert stored.gallery_images == gallery


async def test_create_exhibition_requires_admin(client, store):
    response = await client.post("/api/exhibitions", json=exhibition_payload())
    assert response.status_code == 401
    assert await store("list_exhibitions") == []


async def test_create_exhibition_validates_input(admin_client):
    response = await admin_client.post("/api/exhibitions", json=exhibition_payload(location=""))
    assert response.status_code == 400


async def test_delete_removes_cover_and_gallery_blobs(admin_client, store, make_exhibition, object_store):
    exhibition = await make_exhibition(gallery_images=[
        {"url": blob_url("portfolio/g1"), "caption": ""},
        {"url": "https://elsewhere.example/g2.jpg", "caption": ""},
        {"url": blob_url("portfolio/g3"), "caption": "fin"},
    ])

    response = await admin_client.delete(f"/api/exhibitions/{exhibition.id}")

    assert response.status_code == 200
    assert object_store.deleted == ["portfolio/poster", "portfolio/g1", "portfolio/g3"]
    assert await store("get_exhibition", exhibition.id) is None


async def test_delete_survives_blob_failures(admin_client, store, make_exhibition, object_store):
    exhibition = await make_exhibition()
    object_store.fail_deletes = True

    response = await admin_client.delete(f"/api/exhibitions/{exhibition.id}")

    assert response.status_code == 200
    assert await store("get_exhibition", exhibition.id) is None


async def test_delete_missing_exhibition(admin_client):
    assert (await admin_client.delete("/api/exhibitions/31")).status_code == 404


async def test_gallery_update_deletes_dropped_images(admin_client, store, make_exhibition, object_store):
    keep = {"url": blob_url("portfolio/keep"), "caption": "A"}
    drop = {"url": blob_url("portfolio/drop"), "caption": "B"}
    exhibition = await make_exhibition(gallery_images=[keep, drop])
    added = {"url": blob_url("portfolio/new"), "caption": "C"}

    response = await admin_client.put(f"/api/exhibitions/{exhibition.id}/gallery", json=[added, keep])

    assert response.status_code == 200
    assert response.json()["galleryImages"] == [added, keep]
    assert object_store.deleted == ["portfolio/drop"]
    assert (await store("get_exhibition", exhibition.id)).gallery_images == [added, keep]


async def test_gallery_update_keeps_cover_blob(admin_client, store, make_exhibition, object_store):
    cover = {"url": blob_url("portfolio/poster"), "caption": "Affiche"}
    exhibition = await make_exhibition(gallery_images=[cover])

    response = await admin_client.put(f"/api/exhibitions/{exhibition.id}/gallery", json=[])

    assert response.status_code == 200
    assert response.json()["imageUrl"] == blob_url("portfolio/poster")
    assert object_store.deleted == []
    assert (await store("get_exhibition", exhibition.id)).gallery_images == []


async def test_gallery_update_rejects_malformed_body(admin_client, make_exhibition, object_store):
    exhibition = await make_exhibition(gallery_images=[{"url": blob_url("portfolio/g1"), "caption": ""}])

    response = await admin_client.put(f"/api/exhibitions/{exhibition.id}/gallery", json=[{"caption": "no url"}])

    assert response.status_code == 400
    assert object_store.deleted == []


async def test_gallery_update_missing_exhibition(admin_client):
    response = await admin_client.put("/api/exhibitions/8/gallery", json=[])
    assert response.status_code == 404


async def test_reorder_exhibitions(admin_client, client, make_exhibition):
    a = await make_exhibition(order=0)
    b = await make_exhibition(order=1)

    response = await admin_client.put("/api/exhibitions/order", json=[
        {"id": a.id, "order": 1},
        {"id": b.id, "order": 0},
    ])

    assert response.json() == {"success": True, "count": 2}
    assert [e["id"] for e in (await client.get("/api/exhibitions")).json()] == [b.id, a.id]


async def test_reorder_exhibitions_unknown_id(admin_client, store, make_exhibition):
    a = await make_exhibition(order=3)

    response = await admin_client.put("/api/exhibitions/order", json=[
        {"id": a.id, "order": 0},
        {"id": 500, "order": 1},
    ])

    assert response.status_code == 404
    assert (await store("get_exhibition", a.id)).order == 3


async def test_move_exhibition(admin_client, make_exhibition):
    a = await make_exhibition(order=0)
    b = await make_exhibition(order=1)
    c = await make_exhibition(order=2)

    response = await admin_client.put(f"/api/exhibitions/{c.id}/position", json={"position": 0})

    assert response.json()["order"] == [c.id, a.id, b.id]


async def test_move_exhibition_database_failure(admin_client, make_exhibition, monkeypatch):
    a = await make_exhibition(order=0)
    await make_exhibition(order=1)

    async def failing_reorder(self, entries):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(PortfolioRepository, "reorder_exhibitions", failing_reorder)

    response = await admin_client.put(f"/api/exhibitions/{a.id}/position", json={"position": 1})

    assert response.status_code == 500
    assert response.json()["error"] == "upstream_error"
