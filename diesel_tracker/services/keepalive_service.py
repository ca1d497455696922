"""
Service keepalive de la base hebergee / Hosted database keepalive service.
Lectures reelles pour eviter la mise en pause pour inactivite, alertes webhook.
Real reads so the database is not paused for inactivity, webhook alerts.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx

from diesel_tracker.services.fill_store import FillStore

logger = logging.getLogger("diesel_tracker.keepalive")

RECENT_DAYS = 30
COLOR_ERROR = 15158332  # rouge / red
COLOR_OK = 3066993  # vert / green


@dataclass
class KeepaliveResult:
    total: int
    recent: int
    latest_ids: list[str]


class KeepaliveService:
    """Sonde d'activite / Activity probe."""

    @staticmethod
    def build_alert_payload(message: str, is_error: bool, timestamp: str) -> dict:
        """Payload style Discord / Discord-style payload."""
        title = "Database Keepalive Error" if is_error else "Database Keepalive"
        headline = "🔴 **Keepalive Failed**" if is_error else "✅ Keepalive Success"
        return {
            "content": f"{headline}\n{message}",
            "embeds": [{
                "title": title,
                "description": message,
                "color": COLOR_ERROR if is_error else COLOR_OK,
                "timestamp": timestamp,
            }],
        }

    @staticmethod
    async def send_alert(
        webhook_url: str | None,
        message: str,
        is_error: bool = True,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> bool:
        """Envoyer une alerte / Send an alert. Returns False when skipped or failed.

        Un echec d'envoi est journalise sans interrompre le keepalive.
        A delivery failure is logged without breaking the keepalive.
        """
        if not webhook_url:
            return False
        timestamp = datetime.now(timezone.utc).isoformat()
        payload = KeepaliveService.build_alert_payload(message, is_error, timestamp)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.post(webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to send keepalive alert")
            return False
        return True

    @staticmethod
    async def probe(store: FillStore, now: datetime | None = None) -> KeepaliveResult:
        """Compter, lire les plus recents, compter les 30 derniers jours /
        Count, read the most recent, count the last 30 days."""
        now = now or datetime.now(timezone.utc)
        total = await store.count()
        latest_ids = await store.recent_ids(5)
        recent = await store.count(since=now - timedelta(days=RECENT_DAYS))
        return KeepaliveResult(total=total, recent=recent, latest_ids=latest_ids)
