"""
ComplaintDesk - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator, List, Tuple
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment before the settings singleton is built
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_complaintdesk.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing-only-0123456789'
os.environ['SMTP_HOST'] = 'smtp.test.local'
os.environ['SMTP_USER'] = 'notifier@test.local'
os.environ['SMTP_PASSWORD'] = 'test-smtp-password'
os.environ['EMAIL_FROM'] = 'notifier@test.local'
os.environ['ADMIN_EMAIL'] = 'admin-inbox@test.local'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''

from complaintdesk.main import app
from complaintdesk.core.database import Base, get_db
from complaintdesk.core.security import get_password_hash, create_access_token
from complaintdesk.models.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintPriority,
    ComplaintStatus,
)
from complaintdesk.models.user import User, UserRole
from complaintdesk.schemas.auth import TokenClaims
from complaintdesk.schemas.complaint import ComplaintResponse
from complaintdesk.services.notification_service import NotificationSender, get_notifier
from complaintdesk.services.user_service import claims_for

fake = Faker()

TEST_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_complaintdesk.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


class RecordingNotifier(NotificationSender):
    """Notification sender that records calls instead of sending email"""

    def __init__(self):
        self.created: List[ComplaintResponse] = []
        self.status_updated: List[ComplaintResponse] = []

    async def complaint_created(self, complaint: ComplaintResponse) -> None:
        self.created.append(complaint)

    async def complaint_status_updated(self, complaint: ComplaintResponse) -> None:
        self.status_updated.append(complaint)


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
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def client(db_session: AsyncSession, notifier: RecordingNotifier) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and notifier overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, role: UserRole, password: str = TEST_PASSWORD) -> User:
    user = User(
        name=fake.name(),
        email=fake.unique.email(),
        hashed_password=get_password_hash(password),
        role=role,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a regular test user"""
    return await _create_user(db_session, UserRole.USER)


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second regular user"""
    return await _create_user(db_session, UserRole.USER)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    return await _create_user(db_session, UserRole.ADMIN)


def bearer(claims: TokenClaims) -> dict:
    return {'Authorization': f'Bearer {create_access_token(claims)}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return bearer(claims_for(test_user))


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return bearer(claims_for(other_user))


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return bearer(claims_for(admin_user))


@pytest.fixture
def make_complaint(db_session: AsyncSession):
    """Factory inserting a complaint owned by ``owner`` directly into the store"""
    async def _make(
        owner: User,
        title: str = None,
        status: ComplaintStatus = ComplaintStatus.PENDING,
        priority: ComplaintPriority = ComplaintPriority.MEDIUM,
        category: ComplaintCategory = ComplaintCategory.PRODUCT,
        date_submitted: datetime = None,
    ) -> Complaint:
        complaint = Complaint(
            title=title or fake.sentence(nb_words=4),
            description=fake.paragraph(),
            category=category,
            priority=priority,
            status=status,
            date_submitted=date_submitted or datetime.utcnow(),
            user_id=owner.id,
            user_email=owner.email,
            user_name=owner.name,
        )
        db_session.add(complaint)
        await db_session.commit()
        await db_session.refresh(complaint)
        return complaint

    return _make


@pytest.fixture
async def spread_complaints(make_complaint, test_user: User, other_user: User) -> Tuple[Complaint, ...]:
    """Three complaints a day apart: two for test_user, one for other_user"""
    base = datetime(2024, 5, 1, 12, 0, 0)
    oldest = await make_complaint(test_user, title='Oldest', date_submitted=base)
    middle = await make_complaint(
        other_user, title='Middle', priority=ComplaintPriority.HIGH, date_submitted=base + timedelta(days=1)
    )
    newest = await make_complaint(
        test_user,
        title='Newest',
        status=ComplaintStatus.RESOLVED,
        priority=ComplaintPriority.HIGH,
        date_submitted=base + timedelta(days=2),
    )
    return oldest, middle, newest
