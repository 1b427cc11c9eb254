from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.core.config import Config

async_engine = create_async_engine(
    Config.DATABASE_URL,
    echo=Config.DB_ECHO,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db() -> None:
    # register every table on the metadata before create_all
    from app.api.banks.models import BankAccount  # noqa: F401
    from app.api.booking_ledger.models import BookingLedgerEntry  # noqa: F401
    from app.api.bookings.models import ClientBooking  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session():
    async with async_session_maker() as session:
        yield session
