from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from core.config import settings
from .base import Base


def _async_database_url(url: str) -> str:
    # Plain postgres URLs from hosting providers -> asyncpg driver
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


DATABASE_URL = _async_database_url(settings.database_url)

engine = create_async_engine(DATABASE_URL, echo=settings.database_echo)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


# Register every model on Base.metadata and re-export for routers/services.
from .users import User  # noqa: E402,F401
from .warehouse import Warehouse, WarehouseLocation  # noqa: E402,F401
from .inventory import StockRecord, InventoryLog, InventoryAlert  # noqa: E402,F401
from .order import (  # noqa: E402,F401
    InboundOrder,
    InboundOrderItem,
    OutboundOrder,
    OutboundOrderItem,
)
