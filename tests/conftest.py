import os

# Settings() 가 import 시점에 검증하므로 먼저 채워둠
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.database import Base, get_db, get_redis  # noqa: E402
from core.di import get_current_user  # noqa: E402
from domains.auth.gateway import AuthGateway  # noqa: E402
from domains.image.uploader import ImageUploader, validate_image  # noqa: E402
from domains.recipe.models import Recipe  # noqa: E402
from domains.user.models import User  # noqa: E402
from domains.user.schemas import ProviderProfile  # noqa: E402
from main import create_app  # noqa: E402

# 테스트용 DB URL (SQLite In-Memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class InMemoryRedis:
    """SessionStore 가 쓰는 set/get/delete 만 흉내"""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def set(self, name, value, ex=None):
        self.data[name] = value
        return True

    async def get(self, name):
        return self.data.get(name)

    async def delete(self, *names):
        return sum(1 for name in names if self.data.pop(name, None) is not None)


class FakeAuthGateway(AuthGateway):
    def __init__(self):
        self.profile = ProviderProfile(
            provider_id="google-123",
            name="구글유저",
            email="google@example.com",
            image="https://example.com/avatar.png",
        )
        self.error: Exception | None = None

    def get_authorization_url(self, state: str) -> str:
        return f"https://accounts.example.com/auth?state={state}"

    async def fetch_profile(self, code: str) -> ProviderProfile:
        if self.error:
            raise self.error
        return self.profile


class FakeImageUploader(ImageUploader):
    def __init__(self):
        self.uploaded: list[str] = []

    async def upload(self, image) -> str:
        validate_image(image)
        self.uploaded.append(image.filename)
        return f"https://res.cloudinary.com/demo/image/upload/{image.filename}"


@pytest_asyncio.fixture
async def db_engine():
    # In-Memory SQLite는 연결 공유를 위해 StaticPool 필수
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


async def _make_user(db_session, google_id: str, name: str) -> User:
    user = User(google_id=google_id, name=name, email=f"{google_id}@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session) -> User:
    return await _make_user(db_session, "google-test-user", "테스터")


@pytest_asyncio.fixture
async def other_user(db_session) -> User:
    return await _make_user(db_session, "google-other-user", "다른유저")


@pytest.fixture
def make_recipe(db_session):
    """DB 에 레시피를 바로 넣는 헬퍼"""

    async def _make(user: User, **overrides) -> Recipe:
        values = {
            "title": "Chocolate Cake",
            "ingredients": "flour, sugar, cocoa",
            "instructions": "mix and bake",
            "category": "Dessert",
            "cooking_time": 45,
        }
        values.update(overrides)
        recipe = Recipe(created_by=user.id, **values)
        db_session.add(recipe)
        await db_session.commit()
        await db_session.refresh(recipe)
        return recipe

    return _make


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def auth_gateway():
    return FakeAuthGateway()


@pytest.fixture
def image_uploader():
    return FakeImageUploader()


@pytest.fixture
def app(db_session, fake_redis, auth_gateway, image_uploader):
    app = create_app(auth_gateway=auth_gateway, image_uploader=image_uploader)

    # 실제 get_db / get_redis 대신 테스트용 객체 주입
    async def _get_test_db():
        yield db_session

    async def _get_test_redis():
        yield fake_redis

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_redis] = _get_test_redis
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def login_as(app):
    """이후 요청을 주어진 유저로 보냄"""

    def _login(user: User):
        app.dependency_overrides[get_current_user] = lambda: user

    return _login


@pytest_asyncio.fixture
async def authorized_client(client, login_as, test_user):
    login_as(test_user)
    return client
