import redis.asyncio as redis
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from core.config import settings

POSTGRES_DATABASE_URL = settings.POSTGRES_DATABASE_URL

engine = create_async_engine(
    POSTGRES_DATABASE_URL,
    echo=settings.DB_ECHO,  # 개발 중에는 DB_ECHO=true 로 쿼리 로그 보기
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with async_session_factory() as session:
        yield session


redis_pool = redis.ConnectionPool.from_url(settings.REDIS_URL, decode_responses=True, encoding="utf-8")


async def get_redis():
    client = redis.Redis(connection_pool=redis_pool)
    try:
        yield client
    finally:
        await client.aclose()


async def init_db():
    # 마이그레이션 도구 없이 시작 시 테이블 생성 (이미 있는 테이블은 건드리지 않음)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    await engine.dispose()
    await redis_pool.disconnect()
