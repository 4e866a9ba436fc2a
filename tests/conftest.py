"""
Pytest configuration for portfolio API tests.

Each test gets a fresh in-memory SQLite schema, an in-memory stand-in for
the Cloudinary gateway, and rate limiting switched off.
"""
import io

import pytest
from cloudinary.exceptions import Error as CloudinaryError
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from portfolio.config import settings
from portfolio.database import Base, get_db
from portfolio.main import app
from portfolio.repository import PortfolioRepository
from portfolio.services import cloudinary_service
from portfolio.utils.rate_limit import limiter
from portfolio.utils.session_auth import create_session_token

CLOUD_NAME = "demo"


def blob_url(public_id: str) -> str:
    return f"https://res.cloudinary.com/{CLOUD_NAME}/image/upload/v1/{public_id}.jpg"


def make_image_bytes(fmt: str = "JPEG", size=(64, 48), mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    Image.new(mode, size, color[:len(mode)]).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeObjectStore:
    """Records uploads and deletions instead of calling Cloudinary."""

    def __init__(self):
        self.blobs = {}
        self.uploaded = []
        self.deleted = []
        self.fail_upload_on_call = None  # 1-based call number that raises
        self.fail_deletes = False

    async def upload_image(self, file, folder=None, public_id=None, max_retries=None):
        call_number = len(self.uploaded) + 1
        if self.fail_upload_on_call == call_number:
            self.uploaded.append(None)
            raise CloudinaryError("simulated upload failure")

        public_id = f"{folder or settings.CLOUDINARY_FOLDER}/blob{call_number}"
        self.blobs[public_id] = file
        self.uploaded.append(public_id)
        return {
            "url": blob_url(public_id),
            "public_id": public_id,
            "format": "jpg",
            "width": None,
            "height": None,
            "bytes": len(file),
        }

    async def delete_image(self, public_id):
        self.deleted.append(public_id)
        if self.fail_deletes:
            raise CloudinaryError("simulated delete failure")
        self.blobs.pop(public_id, None)
        return {"result": "ok"}


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Fast hashing, a known admin, a known cloud name and no rate limiting."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "admin")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")
    monkeypatch.setattr(settings, "CLOUDINARY_CLOUD_NAME", CLOUD_NAME)
    monkeypatch.setattr(settings, "SMTP_HOST", "")
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture
def object_store(monkeypatch):
    store = FakeObjectStore()
    monkeypatch.setattr(cloudinary_service, "upload_image", store.upload_image)
    monkeypatch.setattr(cloudinary_service, "delete_image", store.delete_image)
    return store


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    """Run a single repository method in its own session: await store("get_artwork", 1)."""
    async def call(method, *args, **kwargs):
        async with session_factory() as session:
            return await getattr(PortfolioRepository(session), method)(*args, **kwargs)
    return call


@pytest.fixture
async def repo(session_factory):
    async with session_factory() as session:
        yield PortfolioRepository(session)


@pytest.fixture
async def client(session_factory, object_store):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """The same client, carrying a valid admin session cookie."""
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token("admin"))
    return client


@pytest.fixture
def make_artwork(store):
    async def create(**overrides):
        fields = {
            "title": "Untitled",
            "technique": "Oil on canvas",
            "year": "2021",
            "image_url": blob_url("portfolio/cover"),
            "dimensions": "",
            "description": "",
            "category": "Peinture",
            "additional_images": [],
            "is_visible": True,
            "show_in_slider": True,
            "order": 0,
        }
        fields.update(overrides)
        return await store("create_artwork", **fields)
    return create


@pytest.fixture
def make_exhibition(store):
    async def create(**overrides):
        fields = {
            "title": "Solo show",
            "location": "Lyon",
            "year": "2023",
            "image_url": blob_url("portfolio/poster"),
            "description": "Paintings",
            "gallery_images": [],
            "order": 0,
        }
        fields.update(overrides)
        return await store("create_exhibition", **fields)
    return create
