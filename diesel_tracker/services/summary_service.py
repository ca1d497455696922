"""
Service de synthese des pleins / Fill summary service.
Recalcule a chaque appel sur la fenetre fournie / Recomputed on every call over the given window.
"""

from typing import Any, Iterable

from diesel_tracker.schemas.fill import FillSummary


class SummaryService:
    """Totaux et moyennes / Totals and averages."""

    @staticmethod
    def liters(price_cents_per_liter: Any, total_cost_eur: Any) -> float:
        """Litres = cout / (prix / 100), 0 si prix nul / 0 when price is zero."""
        price_eur = float(price_cents_per_liter or 0) / 100
        if price_eur == 0:
            return 0.0
        return float(total_cost_eur or 0) / price_eur

    @staticmethod
    def summarize(fills: Iterable[Any]) -> FillSummary:
        """Depense totale, prix moyen au litre, litres, nombre /
        Total spend, average price per liter, liters, count."""
        window = list(fills)
        if not window:
            return FillSummary(total_spend=0.0, average_price_per_liter=0.0, total_liters=0.0, count=0)

        total_spend = sum(float(f.total_cost_eur) for f in window)
        avg_price = sum(float(f.price_cents_per_liter) / 100 for f in window) / len(window)
        total_liters = sum(SummaryService.liters(f.price_cents_per_liter, f.total_cost_eur) for f in window)
        return FillSummary(
            total_spend=round(total_spend, 2),
            average_price_per_liter=round(avg_price, 3),
            total_liters=round(total_liters, 2),
            count=len(window),
        )
