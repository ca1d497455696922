"""Modèle Plein de gasoil / Diesel fill model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from diesel_tracker.database import Base
from diesel_tracker.services.summary_service import SummaryService


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Fill(Base):
    """Plein enregistre / Recorded fill.

    filled_at est stocke en UTC, construit a midi local / stored in UTC, built at local noon.
    """
    __tablename__ = "fills"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    filled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    price_cents_per_liter: Mapped[float] = mapped_column(Numeric(6, 1), nullable=False)  # c/L
    total_cost_eur: Mapped[float] = mapped_column(Numeric(8, 2), nullable=False)
    range_remaining_km: Mapped[int | None] = mapped_column(Integer)
    station_name: Mapped[str | None] = mapped_column(String(100))
    reset_trip: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    note: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=_utcnow)

    @property
    def liters(self) -> float:
        """Litres estimes / Estimated liters (0 si prix nul / 0 when price is zero)."""
        return SummaryService.liters(self.price_cents_per_liter, self.total_cost_eur)

    def __repr__(self) -> str:
        return f"<Fill {self.id} {self.price_cents_per_liter}c/L = {self.total_cost_eur}>"
