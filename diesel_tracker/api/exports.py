"""Routes Export CSV/Excel / Export API routes."""

import io
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from diesel_tracker.config import settings
from diesel_tracker.rate_limit import limiter
from diesel_tracker.services.export_service import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE, ExportService
from diesel_tracker.services.fill_store import FillStore, get_fill_store
from diesel_tracker.utils.dates import display_tz

router = APIRouter()


@router.get("/fills")
@limiter.limit(settings.RATE_LIMIT_EXPORT)
async def export_fills(
    request: Request,
    format: str = Query("csv", pattern="^(csv|xlsx)$"),
    store: FillStore = Depends(get_fill_store),
):
    """Exporter tous les pleins, plus recents d'abord / Export all fills, most recent first."""
    fills = await store.list_all()
    tz = display_tz()
    today = datetime.now(tz).date()

    if format == "csv":
        content = ExportService.to_csv(fills, tz, settings.CSV_DATE_FORMAT).encode("utf-8")
        media_type = CSV_MEDIA_TYPE
    else:
        content = ExportService.to_xlsx(fills, tz)
        media_type = XLSX_MEDIA_TYPE
    filename = ExportService.export_filename(settings.APP_SLUG, format, today)

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )
