"""
Acces stockage des pleins / Fill storage access.
Enveloppe une AsyncSession injectee par requete, jamais un client global.
Wraps a per-request injected AsyncSession, never a global client.
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from diesel_tracker.database import get_db
from diesel_tracker.models.fill import Fill

logger = logging.getLogger("diesel_tracker.store")


def is_unique_violation(exc: IntegrityError) -> bool:
    """Conflit de contrainte unique ? / Unique constraint conflict?

    SQLite: 'UNIQUE constraint failed', PostgreSQL: SQLSTATE 23505.
    """
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    message = str(orig).lower()
    return "unique" in message or "duplicate key" in message


class FillStore:
    """Operations CRUD sur la table fills / CRUD operations on the fills table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, fill_id: str) -> Fill | None:
        return await self.session.get(Fill, fill_id)

    async def insert(self, values: dict[str, Any]) -> Fill:
        """Inserer un plein valide / Insert a validated fill."""
        fill = Fill(**values)
        self.session.add(fill)
        await self.session.flush()
        await self.session.refresh(fill)
        return fill

    async def update(self, fill_id: str, changes: dict[str, Any]) -> Fill | None:
        """Modifier un plein par ID / Update a fill by ID.

        Un conflit d'unicite est journalise puis ignore: la ligne est relue.
        A unique conflict is logged then ignored: the row is read back.
        """
        fill = await self.get(fill_id)
        if fill is None:
            return None
        for key, value in changes.items():
            setattr(fill, key, value)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            logger.warning("Unique conflict ignored on fill %s update: %s", fill_id, exc.orig)
            await self.session.rollback()
            return await self.session.get(Fill, fill_id, populate_existing=True)
        await self.session.refresh(fill)
        return fill

    async def delete(self, fill_id: str) -> bool:
        fill = await self.get(fill_id)
        if fill is None:
            return False
        await self.session.delete(fill)
        await self.session.flush()
        return True

    async def list_window(
        self,
        limit: int,
        since: datetime | None = None,
        until: datetime | None = None,
        station: str | None = None,
    ) -> list[Fill]:
        """Pleins les plus recents d'abord / Most recent fills first."""
        query = select(Fill).order_by(Fill.filled_at.desc(), Fill.created_at.desc())
        if since is not None:
            query = query.where(Fill.filled_at >= since)
        if until is not None:
            query = query.where(Fill.filled_at <= until)
        if station:
            query = query.where(Fill.station_name == station)
        result = await self.session.execute(query.limit(limit))
        return list(result.scalars().all())

    async def list_all(self) -> list[Fill]:
        result = await self.session.execute(select(Fill).order_by(Fill.filled_at.desc()))
        return list(result.scalars().all())

    async def station_names_since(self, since: datetime, limit: int = 1000) -> list[str]:
        """Noms de station depuis une date / Station names since a date."""
        result = await self.session.execute(
            select(Fill.station_name)
            .where(Fill.station_name.is_not(None), Fill.filled_at >= since)
            .limit(limit)
        )
        return [name for name in result.scalars().all() if name]

    async def count(self, since: datetime | None = None) -> int:
        query = select(func.count(Fill.id))
        if since is not None:
            query = query.where(Fill.filled_at >= since)
        return await self.session.scalar(query) or 0

    async def recent_ids(self, limit: int = 5) -> list[str]:
        result = await self.session.execute(
            select(Fill.id).order_by(Fill.filled_at.desc()).limit(limit)
        )
        return list(result.scalars().all())


async def get_fill_store(db: AsyncSession = Depends(get_db)) -> FillStore:
    """Dependance FastAPI / FastAPI dependency."""
    return FillStore(db)
