"""
Service de validation des pleins / Fill validation service.
Regles: date valide, prix > 0, cout >= 0 (un plein gratuit est permis), dans les bornes des colonnes.
Rules: valid date, price > 0, cost >= 0 (a free fill is allowed), within column bounds.
"""

import math
from datetime import datetime

INVALID_FILL_MESSAGE = "Invalid date, price, or cost."

# Bornes des colonnes Numeric(6, 1) et Numeric(8, 2) / Numeric(6, 1) and Numeric(8, 2) column bounds
MAX_PRICE_CENTS_PER_LITER = 99999.9
MAX_TOTAL_COST_EUR = 999999.99


class FillValidationError(ValueError):
    """Rejet generique d'un plein / Generic fill rejection."""

    def __init__(self, fields: list[str]):
        super().__init__(INVALID_FILL_MESSAGE)
        self.fields = fields


class FillValidatorService:
    """Validation des invariants d'un plein / Fill invariant checks."""

    @staticmethod
    def invalid_fields(
        filled_at: datetime | None,
        price_cents_per_liter: float,
        total_cost_eur: float,
    ) -> list[str]:
        """Lister les champs invalides / List invalid fields (empty when valid)."""
        fields = []
        if filled_at is None:
            fields.append("date")
        if not math.isfinite(price_cents_per_liter) or price_cents_per_liter <= 0 \
                or price_cents_per_liter > MAX_PRICE_CENTS_PER_LITER:
            fields.append("price")
        if not math.isfinite(total_cost_eur) or total_cost_eur < 0 \
                or total_cost_eur > MAX_TOTAL_COST_EUR:
            fields.append("cost")
        return fields

    @classmethod
    def validate(
        cls,
        filled_at: datetime | None,
        price_cents_per_liter: float,
        total_cost_eur: float,
    ) -> tuple[datetime, float, float]:
        """Accepter ou rejeter / Accept or reject.

        Leve FillValidationError si une regle echoue / Raises FillValidationError on any failure.
        """
        fields = cls.invalid_fields(filled_at, price_cents_per_liter, total_cost_eur)
        if fields:
            raise FillValidationError(fields)
        return filled_at, price_cents_per_liter, total_cost_eur

    @classmethod
    def is_valid(
        cls,
        filled_at: datetime | None,
        price_cents_per_liter: float,
        total_cost_eur: float,
    ) -> bool:
        return not cls.invalid_fields(filled_at, price_cents_per_liter, total_cost_eur)
