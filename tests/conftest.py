"""Shared test fixtures for pytest"""
import os

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from boxtrack.domain.enums import TenantStatus, WorkspaceRole  # noqa: E402
from boxtrack.infrastructure.persistence.database import (  # noqa: E402
    Base, build_engine, get_db, get_db_autocommit, get_db_transactional)
from boxtrack.infrastructure.persistence.models import Tenant  # noqa: E402
from boxtrack.infrastructure.security.jwt import \
    create_access_token  # noqa: E402
from boxtrack.presentation.api.dependencies import (  # noqa: E402
    build_code_registry, build_container_store, build_location_tree)
from main import app  # noqa: E402


@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite database file per test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'boxtrack_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory):
    """Create test database session"""
    async with session_factory() as session:
        yield session


async def _create_tenant(session: AsyncSession, tenant_id: str, code: str) -> Tenant:
    tenant = Tenant(id=tenant_id, code=code, name=f"Tenant {code}", status=TenantStatus.ACTIVE.value)
    session.add(tenant)
    await session.commit()
    return tenant


@pytest.fixture
async def test_tenant(test_db):
    """Create test tenant"""
    return await _create_tenant(test_db, "test-tenant-id", "TEST")


@pytest.fixture
async def other_tenant(test_db):
    """Second tenant for isolation tests"""
    return await _create_tenant(test_db, "other-tenant-id", "OTHER")


@pytest.fixture
def location_tree(test_db):
    return build_location_tree(test_db)


@pytest.fixture
def code_registry(test_db):
    return build_code_registry(test_db)


@pytest.fixture
def container_store(test_db):
    return build_container_store(test_db)


@pytest.fixture
async def client(session_factory):
    """HTTP client for API testing; every request gets its own sessions like in production"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_autocommit] = override_get_db
    app.dependency_overrides[get_db_transactional] = override_get_db_transactional

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def make_auth_headers(tenant_id: str, role: WorkspaceRole = WorkspaceRole.MEMBER, sub: str = "test-user-id"):
    token = create_access_token(sub, tenant_id, role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_tenant):
    """Generate auth headers with JWT token for a member of the test tenant"""
    return make_auth_headers(test_tenant.id)


@pytest.fixture
def read_only_headers(test_tenant):
    return make_auth_headers(test_tenant.id, WorkspaceRole.READ_ONLY, sub="viewer-id")


@pytest.fixture
def other_tenant_headers(other_tenant):
    return make_auth_headers(other_tenant.id, sub="outsider-id")


@pytest.fixture
def tenant_id(test_tenant) -> str:
    """ID of the test tenant; plain string so it survives session rollbacks"""
    return test_tenant.id


@pytest.fixture
def other_tenant_id(other_tenant) -> str:
    return other_tenant.id


@pytest.fixture
def unknown_tenant_headers(test_tenant):
    """Valid token for a workspace that does not exist"""
    return make_auth_headers("no-such-tenant")
