"""
Campus Activity Board - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Callable, Dict, List, Optional, Tuple
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_campus_board.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_user_token
from app.models.user import User
from app.utils.storage_client import get_storage_client

fake = Faker()

DEFAULT_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_campus_board.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


def fake_roll_number() -> str:
    """Random roll number in the AA9999/999 format"""
    return fake.bothify('??####/###', letters='ABCDEFGHIJKLMNOPQRSTUVWXYZ')


class FakeStorageClient:
    """Records uploads instead of talking to S3/MinIO"""

    def __init__(self):
        self.uploads: List[Tuple[str, bytes, Optional[str]]] = []
        self.deleted: List[str] = []

    def upload_bytes(self, data: bytes, object_name: str, content_type: Optional[str] = None) -> str:
        self.uploads.append((object_name, data, content_type))
        return f"https://storage.test/{object_name}"

    def delete_file(self, object_name: str) -> bool:
        self.deleted.append(object_name)
        return True


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def storage() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
async def client(db_session: AsyncSession, storage: FakeStorageClient) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and storage overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    """Factory: await make_user(is_verified=True) -> User"""
    async def _make_user(
        roll_number: Optional[str] = None,
        name: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        is_verified: bool = False,
        is_admin: bool = False,
    ) -> User:
        user = User(
            roll_number=roll_number or fake_roll_number(),
            name=name or fake.name(),
            password_hash=get_password_hash(password),
            is_verified=is_verified,
            is_admin=is_admin,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
async def test_user(make_user) -> User:
    """A signed-up but unverified student"""
    return await make_user()


@pytest.fixture
async def verified_user(make_user) -> User:
    """A verified student who may post activities"""
    return await make_user(is_verified=True)


@pytest.fixture
async def admin_user(make_user) -> User:
    """Create an admin test user"""
    return await make_user(is_verified=True, is_admin=True)


def headers_for(user: User) -> Dict[str, str]:
    """Bearer header carrying the user's access token"""
    return {'Authorization': f'Bearer {create_user_token(user)}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return headers_for(test_user)


@pytest.fixture
def verified_headers(verified_user: User) -> dict:
    return headers_for(verified_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return headers_for(admin_user)


def open_activity_payload(**overrides) -> dict:
    """Valid OPEN activity body in wire (camelCase) form"""
    payload = {
        'type': 'OPEN',
        'title': 'Evening Run Club',
        'description': 'A relaxed five kilometre run around campus.',
        'genre': 'SPORTS',
        'frequency': 'WEEKLY',
        'location': 'Main Gate',
    }
    payload.update(overrides)
    return payload


def community_activity_payload(**overrides) -> dict:
    payload = {
        'type': 'COMMUNITY',
        'title': 'Campus Photography Circle',
        'description': 'Weekly photo walks and editing sessions for all levels.',
        'genre': 'ART',
        'frequency': 'WEEKLY',
        'communityName': 'Shutterbugs',
        'goals': 'Learn composition and run a year-end exhibition.',
        'meetingFrequency': 'WEEKLY',
    }
    payload.update(overrides)
    return payload


def funded_activity_payload(**overrides) -> dict:
    payload = {
        'type': 'COLLEGE_FUNDED',
        'title': 'Inter-college Hackathon',
        'description': 'A 24 hour hackathon hosted by the coding club.',
        'genre': 'TECH',
        'frequency': 'ONE_OFF',
        'startDate': '2030-03-01T09:00:00Z',
        'fundingGoal': 50000,
        'budgetBreakdown': [{'item': 'Food', 'cost': 20000}],
        'representativeContact': {'name': 'Asha', 'rollNumber': 'CS2023/001'},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def headers() -> Callable[[User], Dict[str, str]]:
    """headers(user) -> Authorization header for any user"""
    return headers_for


@pytest.fixture
def open_payload() -> Callable[..., dict]:
    return open_activity_payload


@pytest.fixture
def community_payload() -> Callable[..., dict]:
    return community_activity_payload


@pytest.fixture
def funded_payload() -> Callable[..., dict]:
    return funded_activity_payload


@pytest.fixture
def make_activity(db_session: AsyncSession) -> Callable:
    """Factory: await make_activity(author, capacity=2) -> ActivityResponse (OPEN by default)"""
    from app.services.activity_service import ActivityService

    async def _make_activity(author: User, payload: Optional[dict] = None, **overrides):
        body = payload if payload is not None else open_activity_payload(**overrides)
        activity, _ = await ActivityService(db_session).create_activity(author, body)
        return activity

    return _make_activity
