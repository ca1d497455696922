"""Schémas Pleins / Fill schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from diesel_tracker.utils.dates import as_utc


class FillForm(BaseModel):
    """Champs bruts du formulaire / Raw form fields, parsed server-side."""
    date: str = ""
    price: str = ""
    cost: str = ""
    range: str | None = None
    station: str | None = None
    reset: str | None = None
    note: str | None = None


class FillFormUpdate(BaseModel):
    """Champs bruts partiels / Partial raw form fields (only those sent are changed)."""
    date: str | None = None
    price: str | None = None
    cost: str | None = None
    range: str | None = None
    station: str | None = None
    reset: str | None = None
    note: str | None = None


class FillRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    filled_at: datetime
    price_cents_per_liter: float
    total_cost_eur: float
    range_remaining_km: int | None = None
    station_name: str | None = None
    reset_trip: bool
    note: str | None = None
    created_at: datetime | None = None
    liters: float

    @field_validator("filled_at", "created_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite relit des datetimes naifs / SQLite reads back naive datetimes
        return as_utc(value) if value is not None else None


class FillSummary(BaseModel):
    total_spend: float
    average_price_per_liter: float
    total_liters: float
    count: int


class FillListResponse(BaseModel):
    items: list[FillRead]
    summary: FillSummary


class StationSuggestions(BaseModel):
    top: list[str]
    rest: list[str]
