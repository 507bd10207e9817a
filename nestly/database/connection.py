from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import StaticPool
from nestly.config import settings


def is_sqlite_url(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def get_database_url():
    """Parse database URL and convert to asyncpg-compatible format (SQLite URLs pass through)"""
    if is_sqlite_url(settings.DATABASE_URL):
        return settings.DATABASE_URL

    # Build URL manually to preserve special characters in password
    original_url = make_url(settings.DATABASE_URL)
    port = original_url.port or 5432

    database_url = (
        f"postgresql+asyncpg://{original_url.username}:{original_url.password}"
        f"@{original_url.host}:{port}/{original_url.database}"
    )

    # Add query parameters (excluding sslmode which we handle in connect_args)
    query_params = {}
    if original_url.query:
        for key, value in original_url.query.items():
            if key not in ['sslmode', 'channel_binding']:
                query_params[key] = value

    if query_params:
        query_string = '&'.join([f"{k}={v}" for k, v in query_params.items()])
        database_url += f"?{query_string}"

    return database_url


def get_connect_args():
    """Get connection arguments for the driver, especially for SSL"""
    if is_sqlite_url(settings.DATABASE_URL):
        return {"check_same_thread": False}

    url = make_url(settings.DATABASE_URL)
    connect_args = {}

    # Hosted Postgres (Supabase, Neon) requires SSL
    if url.query and url.query.get('sslmode') == 'require':
        connect_args['ssl'] = 'require'

    return connect_args


def get_engine_kwargs():
    if is_sqlite_url(settings.DATABASE_URL):
        # One shared connection so in-memory databases survive across sessions
        return {"poolclass": StaticPool}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_recycle": 3600,  # Recycle connections after 1 hour
    }


engine = create_async_engine(
    get_database_url(),
    echo=settings.DEBUG,
    future=True,
    connect_args=get_connect_args(),
    **get_engine_kwargs(),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

Base = declarative_base()


async def close_db():
    """Close database connections"""
    await engine.dispose()
