import os

# settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-console")
os.environ.setdefault("PLATFORM_API_URL", "http://platform.test")

import httpx
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from jose import jwt

from carpool_console.api_client import PlatformApiClient
from carpool_console.config import settings
from carpool_console.core.security import TokenStore
from carpool_console.dependencies import get_client_factory
from carpool_console.models.enterprise import Enterprise
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.models.role import EnterpriseRole
# Import FastAPI app AFTER settings are in place
from carpool_console.main import app
from tests.fake_platform import ENTERPRISES, FakePlatform

PLATFORM_URL = "http://platform.test"


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def make_context(role: EnterpriseRole | str, enterprise_id: str = "ent-1") -> EnterpriseContext:
    """Context for ``role`` in one of the fake platform's enterprises"""
    enterprise = Enterprise.model_validate(ENTERPRISES[enterprise_id])
    return EnterpriseContext.for_role("test-user-123", enterprise, role)


@pytest.fixture
def platform():
    """Fresh fake platform for each test"""
    return FakePlatform()


def client_factory_for(platform: FakePlatform):
    def factory(token_store: TokenStore) -> PlatformApiClient:
        return PlatformApiClient(
            token_store,
            base_url=PLATFORM_URL,
            transport=httpx.ASGITransport(app=platform.app),
        )

    return factory


@pytest_asyncio.fixture
async def api_client(platform, mock_jwt_token):
    """Platform API client wired to the fake platform"""
    async with client_factory_for(platform)(TokenStore(mock_jwt_token)) as client:
        yield client


@pytest.fixture(scope="function")
def client(platform):
    """FastAPI test client whose platform calls go to the fake platform"""
    app.dependency_overrides[get_client_factory] = lambda: client_factory_for(platform)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def owner_context():
    return make_context(EnterpriseRole.OWNER)


@pytest.fixture
def admin_context():
    return make_context(EnterpriseRole.ADMIN)


@pytest.fixture
def member_context():
    return make_context(EnterpriseRole.MEMBER)


@pytest.fixture
def viewer_context():
    return make_context(EnterpriseRole.VIEWER)
