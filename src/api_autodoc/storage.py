"""Endpoint store backed by SQLAlchemy's asyncio extension."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text, UniqueConstraint, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Endpoint(Base):
    """One documented (path, method) pair."""

    __tablename__ = "endpoints"
    __table_args__ = (UniqueConstraint("path", "method", name="uq_endpoints_path_method"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    path: Mapped[str] = mapped_column(Text, nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    document: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"Endpoint(id={self.id!r}, method={self.method!r}, path={self.path!r})"


class EndpointStore:
    """Reads and writes endpoint records.

    Methods are stored upper-case; lookups normalize the method the same way.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_async_engine(database_url, echo=echo)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def find_by_key(self, path: str, method: str) -> Endpoint | None:
        async with self.sessionmaker() as session:
            result = await session.execute(
                select(Endpoint).where(Endpoint.path == path, Endpoint.method == method.upper())
            )
            return result.scalar_one_or_none()

    async def insert(self, path: str, method: str, document: dict[str, Any]) -> Endpoint:
        record = Endpoint(path=path, method=method.upper(), document=document)
        async with self.sessionmaker() as session:
            session.add(record)
            await session.commit()
        return record

    async def update(self, record_id: str, document: dict[str, Any]) -> Endpoint:
        """Replace the document of an existing record.

        Raises ``LookupError`` when no record has ``record_id``.
        """
        async with self.sessionmaker() as session:
            record = await session.get(Endpoint, record_id)
            if record is None:
                raise LookupError(f"No endpoint with id {record_id}")
            record.document = document
            await session.commit()
            return record

    async def list_all_ordered_by_recency(self) -> list[Endpoint]:
        async with self.sessionmaker() as session:
            result = await session.execute(select(Endpoint).order_by(Endpoint.created_at.desc()))
            return list(result.scalars())

    async def count(self) -> int:
        async with self.sessionmaker() as session:
            result = await session.execute(select(func.count()).select_from(Endpoint))
            return result.scalar_one()

    async def ping(self) -> bool:
        """Run one trivial read; return whether it succeeded."""
        try:
            async with self.sessionmaker() as session:
                await session.execute(select(Endpoint.id).limit(1))
        except (SQLAlchemyError, OSError):
            logger.warning("Store health check failed", exc_info=True)
            return False
        return True
