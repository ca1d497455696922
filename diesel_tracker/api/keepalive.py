"""Route keepalive de la base / Database keepalive route."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from diesel_tracker.config import settings
from diesel_tracker.rate_limit import limiter
from diesel_tracker.services.fill_store import FillStore, get_fill_store
from diesel_tracker.services.keepalive_service import KeepaliveService

logger = logging.getLogger("diesel_tracker.keepalive")

router = APIRouter()

NO_STORE = {"Cache-Control": "no-store"}


@router.get("")
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def keepalive(request: Request, store: FillStore = Depends(get_fill_store)):
    """Generer une activite reelle sur la base / Generate real database activity.

    En production, seul le cron (header dedie) est accepte.
    In production, only the cron caller (dedicated header) is accepted.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if not settings.DEBUG and not request.headers.get(settings.KEEPALIVE_CRON_HEADER):
        logger.warning("[%s] Keepalive: Forbidden - missing cron header", timestamp)
        return JSONResponse(status_code=403, content={"ok": False, "error": "Forbidden"})

    try:
        logger.info("[%s] Keepalive: Starting database activity...", timestamp)
        result = await KeepaliveService.probe(store)
        logger.info(
            "[%s] Keepalive: Database queries completed (total records: %d, recent: %d)",
            timestamp, result.total, result.recent,
        )
        if settings.KEEPALIVE_LOG_SUCCESS:
            await KeepaliveService.send_alert(
                settings.KEEPALIVE_ALERT_WEBHOOK_URL,
                f"Database activity successful at {timestamp} "
                f"({result.total} total records, {result.recent} recent)",
                is_error=False,
                timeout=settings.KEEPALIVE_TIMEOUT_SECONDS,
            )
        return Response(status_code=204, headers=NO_STORE)
    except Exception as exc:
        msg = str(exc) or "keepalive failed"
        logger.exception("[%s] Keepalive: Failed", timestamp)
        await store.session.rollback()
        await KeepaliveService.send_alert(
            settings.KEEPALIVE_ALERT_WEBHOOK_URL,
            f"Time: {timestamp}\nError: {msg}\nDebug: {settings.DEBUG}",
            is_error=True,
            timeout=settings.KEEPALIVE_TIMEOUT_SECONDS,
        )
        return JSONResponse(status_code=500, content={"ok": False, "error": msg}, headers=NO_STORE)
