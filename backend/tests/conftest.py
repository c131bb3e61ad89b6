"""
Test configuration and fixtures.
Uses a throwaway SQLite database (aiosqlite) and a local-disk storage
backend rooted in a temporary directory.
"""
import os
import tempfile

# Set test environment before any imports
_TEST_DIR = tempfile.mkdtemp(prefix="pwanystay-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_DIR, "uploads")
os.makedirs(os.environ["UPLOAD_DIR"], exist_ok=True)
for _var in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET", "FIREBASE_PROJECT_ID"):
    os.environ.pop(_var, None)

import pytest
from pathlib import Path
from typing import AsyncGenerator, List

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.auth.dependencies import CurrentUser
from app.models.base import Base
from app.models.property import Property
from app.storage.base import StorageBackend, StorageConfig, StoredAsset, UploadRequest
from app.storage.local import LocalDiskBackend


@pytest.fixture(scope="function")
async def db_session(tmp_path: Path) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Directory the local backend writes to."""
    return tmp_path / "uploads"


@pytest.fixture
def local_storage(upload_dir: Path) -> LocalDiskBackend:
    """Local-disk backend rooted in a temporary directory."""
    return LocalDiskBackend(StorageConfig(upload_dir=str(upload_dir)))


@pytest.fixture
def test_user() -> CurrentUser:
    return CurrentUser(uid="firebase-test-uid", email="owner@example.com")


class FailingBackend(StorageBackend):
    """Backend that stores the first `succeed` uploads, then raises."""

    name = "failing"

    def __init__(self, succeed: int = 0, fail_delete: bool = False):
        self.succeed = succeed
        self.fail_delete = fail_delete
        self.stored: List[UploadRequest] = []
        self.deleted: List[StoredAsset] = []

    async def store(self, upload: UploadRequest) -> StoredAsset:
        if len(self.stored) >= self.succeed:
            raise OSError("disk full")
        self.stored.append(upload)
        return StoredAsset(identifier=f"ok-{len(self.stored)}", location="", backend=self.name)

    async def delete(self, asset: StoredAsset) -> None:
        if self.fail_delete:
            raise OSError("permission denied")
        self.deleted.append(asset)

    def public_url(self, asset: StoredAsset, base_url: str) -> str:
        return f"{base_url}/uploads/{asset.identifier}"


def get_test_app(db_session: AsyncSession, storage: StorageBackend, user: CurrentUser = None) -> FastAPI:
    """Create a test FastAPI app with overridden dependencies."""
    from app.main import app
    from app.database import get_db
    from app.auth.dependencies import get_current_user
    from app.storage.dependencies import get_storage_backend

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_backend] = lambda: storage

    if user is not None:
        async def override_get_current_user():
            return user

        app.dependency_overrides[get_current_user] = override_get_current_user

    return app


@pytest.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    local_storage: LocalDiskBackend,
    test_user: CurrentUser
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = get_test_app(db_session, local_storage, test_user)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def anonymous_client(
    db_session: AsyncSession,
    local_storage: LocalDiskBackend
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose requests go through the real bearer-token check."""
    app = get_test_app(db_session, local_storage)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def failing_storage() -> FailingBackend:
    return FailingBackend(succeed=1)


@pytest.fixture(scope="function")
async def failing_client(
    db_session: AsyncSession,
    failing_storage: FailingBackend,
    test_user: CurrentUser
) -> AsyncGenerator[AsyncClient, None]:
    """Client backed by storage that fails after one upload."""
    app = get_test_app(db_session, failing_storage, test_user)

    # Let the app's 500 handler answer instead of re-raising into the test
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def error_client(
    db_session: AsyncSession,
    local_storage: LocalDiskBackend,
    test_user: CurrentUser
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated local-disk client that answers errors with the 500 envelope."""
    app = get_test_app(db_session, local_storage, test_user)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def selector_client(
    db_session: AsyncSession,
    upload_dir: Path,
    monkeypatch
) -> AsyncGenerator[AsyncClient, None]:
    """
    Client that resolves storage through the real dependency.

    No app.state.storage and a fresh process singleton, with settings
    pointing UPLOAD_DIR at a temporary directory and no Cloudinary creds.
    """
    from app.config import settings
    from app.main import app
    from app.database import get_db
    from app.storage import factory

    monkeypatch.setattr(settings, "upload_dir", str(upload_dir))
    monkeypatch.setattr(settings, "cloudinary_cloud_name", None)
    monkeypatch.setattr(settings, "cloudinary_api_key", None)
    monkeypatch.setattr(settings, "cloudinary_api_secret", None)
    monkeypatch.setattr(factory, "_storage_backend", None)
    monkeypatch.delattr(app.state, "storage", raising=False)

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def sample_properties(db_session: AsyncSession) -> List[Property]:
    """Seed a few listings for browsing tests."""
    properties = [
        Property(name="Ocean-view Cottage", description="Steps from the beach", location="Diani",
                 price=3000, bedrooms=1, type="Cottage", image_url="http://test/uploads/a.png",
                 owner_uid="owner-1"),
        Property(name="Old Town Apartment", description="Near Fort Jesus", location="Mombasa",
                 price=5000, bedrooms=2, type="Apartment", image_url="http://test/uploads/b.png",
                 owner_uid="owner-1"),
        Property(name="Creekside Villa", description="Private pool and ocean breeze", location="Kilifi",
                 price=25000, bedrooms=5, type="Villa", image_url="http://test/uploads/c.png",
                 owner_uid="owner-2"),
        Property(name="Family House", description="Quiet street", location="Malindi",
                 price=12000, bedrooms=6, type="House", image_url="http://test/uploads/d.png",
                 owner_uid="owner-2"),
    ]
    db_session.add_all(properties)
    await db_session.commit()
    return properties


@pytest.fixture(scope="function")
async def static_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client whose local backend writes to the directory mounted at /uploads."""
    from app.config import settings

    storage = LocalDiskBackend(StorageConfig(upload_dir=settings.upload_dir))
    app = get_test_app(db_session, storage)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
