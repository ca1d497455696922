"""Routes Pleins de gasoil / Diesel fill API routes."""

from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from diesel_tracker.config import settings
from diesel_tracker.schemas.fill import (
    FillForm,
    FillFormUpdate,
    FillListResponse,
    FillRead,
    FillSummary,
    StationSuggestions,
)
from diesel_tracker.services.fill_parser import FillParserService
from diesel_tracker.services.fill_store import FillStore, get_fill_store
from diesel_tracker.services.fill_validator import FillValidatorService
from diesel_tracker.services.station_service import StationService
from diesel_tracker.services.summary_service import SummaryService
from diesel_tracker.utils.dates import as_utc, display_tz

router = APIRouter()


def _day_bounds(since: date | None, until: date | None) -> tuple[datetime | None, datetime | None]:
    """Bornes UTC des jours locaux / UTC bounds of local days."""
    tz = display_tz()
    start = as_utc(datetime.combine(since, time.min, tzinfo=tz)) if since else None
    end = as_utc(datetime.combine(until + timedelta(days=1), time.min, tzinfo=tz)) if until else None
    if end is not None:
        end -= timedelta(microseconds=1)
    return start, end


async def _load_window(
    store: FillStore,
    limit: int | None,
    since: date | None,
    until: date | None,
    station: str | None,
):
    start, end = _day_bounds(since, until)
    return await store.list_window(limit or settings.FILL_WINDOW_LIMIT, start, end, station)


@router.get("/", response_model=FillListResponse)
async def list_fills(
    limit: int | None = Query(default=None, ge=1, le=500),
    since: date | None = Query(default=None),
    until: date | None = Query(default=None),
    station: str | None = Query(default=None),
    store: FillStore = Depends(get_fill_store),
):
    """Lister la fenetre de pleins + synthese / List the fill window + summary."""
    fills = await _load_window(store, limit, since, until, station)
    return {"items": fills, "summary": SummaryService.summarize(fills)}


@router.get("/summary", response_model=FillSummary)
async def get_summary(
    limit: int | None = Query(default=None, ge=1, le=500),
    since: date | None = Query(default=None),
    until: date | None = Query(default=None),
    station: str | None = Query(default=None),
    store: FillStore = Depends(get_fill_store),
):
    """Synthese de la fenetre / Window summary."""
    fills = await _load_window(store, limit, since, until, station)
    return SummaryService.summarize(fills)


@router.get("/stations", response_model=StationSuggestions)
async def list_stations(store: FillStore = Depends(get_fill_store)):
    """Stations suggerees pour le formulaire / Suggested stations for the form."""
    since = datetime.now(timezone.utc) - timedelta(days=settings.STATION_LOOKBACK_DAYS)
    recent = await store.station_names_since(since)
    top, rest = StationService.rank_stations(settings.DEFAULT_STATIONS, recent, settings.STATION_TOP_N)
    return {"top": top, "rest": rest}


@router.get("/{fill_id}", response_model=FillRead)
async def get_fill(fill_id: str, store: FillStore = Depends(get_fill_store)):
    """Obtenir un plein par ID / Get fill by ID."""
    fill = await store.get(fill_id)
    if not fill:
        raise HTTPException(status_code=404, detail="Fill not found")
    return fill


@router.post("/", response_model=FillRead, status_code=201)
async def create_fill(data: FillForm, store: FillStore = Depends(get_fill_store)):
    """Creer un plein depuis le formulaire brut / Create a fill from the raw form."""
    parsed = FillParserService.parse_fill_form(data, display_tz())
    filled_at, price, cost = FillValidatorService.validate(
        parsed.filled_at, parsed.price_cents_per_liter, parsed.total_cost_eur
    )

    return await store.insert({
        "filled_at": as_utc(filled_at),
        "price_cents_per_liter": price,
        "total_cost_eur": cost,
        "range_remaining_km": parsed.range_remaining_km,
        "station_name": parsed.station_name,
        "reset_trip": parsed.reset_trip,
        "note": parsed.note,
    })


@router.put("/{fill_id}", response_model=FillRead)
async def update_fill(fill_id: str, data: FillFormUpdate, store: FillStore = Depends(get_fill_store)):
    """Modifier un plein (champs envoyes seulement) / Update a fill (sent fields only)."""
    fill = await store.get(fill_id)
    if not fill:
        raise HTTPException(status_code=404, detail="Fill not found")

    raw = data.model_dump(exclude_unset=True)
    changes = {}
    if "date" in raw:
        changes["filled_at"] = FillParserService.parse_local_date(raw["date"], display_tz())
    if "price" in raw:
        changes["price_cents_per_liter"] = FillParserService.parse_price(raw["price"])
    if "cost" in raw:
        changes["total_cost_eur"] = FillParserService.parse_cost(raw["cost"])
    if "range" in raw:
        changes["range_remaining_km"] = FillParserService.parse_optional_integer(raw["range"])
    if "station" in raw:
        changes["station_name"] = FillParserService.clean_text(raw["station"])
    if "reset" in raw:
        changes["reset_trip"] = FillParserService.parse_reset_flag(raw["reset"])
    if "note" in raw:
        changes["note"] = FillParserService.clean_text(raw["note"])

    # Valider l'etat fusionne / Validate the merged state
    FillValidatorService.validate(
        changes.get("filled_at", fill.filled_at),
        float(changes.get("price_cents_per_liter", fill.price_cents_per_liter)),
        float(changes.get("total_cost_eur", fill.total_cost_eur)),
    )

    if "filled_at" in changes:
        changes["filled_at"] = as_utc(changes["filled_at"])
    return await store.update(fill_id, changes)


@router.delete("/{fill_id}", status_code=204)
async def delete_fill(fill_id: str, store: FillStore = Depends(get_fill_store)):
    """Supprimer un plein / Delete a fill."""
    if not await store.delete(fill_id):
        raise HTTPException(status_code=404, detail="Fill not found")
