"""
Service de parsing du formulaire de plein / Fill form parsing service.
Convertit les saisies brutes (prix, cout, autonomie, date) en valeurs typees.
Converts raw user input (price, cost, range, date) into typed values.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from diesel_tracker.schemas.fill import FillForm

_CURRENCY_SYMBOLS = "€$£"
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_YMD = re.compile(r"\d{4}-\d{2}-\d{2}")
_NON_DIGITS = re.compile(r"\D+")
_WHITESPACE = re.compile(r"\s+")

# Midi local, jamais minuit / Local noon, never midnight
LOCAL_NOON = time(12, 0)


@dataclass
class ParsedFill:
    """Valeurs parsees, pas encore validees / Parsed values, not yet validated."""
    filled_at: datetime | None
    price_cents_per_liter: float
    total_cost_eur: float
    range_remaining_km: int | None
    station_name: str | None
    reset_trip: bool
    note: str | None


class FillParserService:
    """Parsing des champs saisis / Parsing of entered fields."""

    @staticmethod
    def parse_decimal(raw: str | None) -> float:
        """Parser un decimal localise / Parse a localized decimal.

        Tolere un symbole monetaire en tete, les espaces et la virgule decimale.
        Tolerates a leading currency symbol, whitespace and a decimal comma.
        Retourne nan si non numerique / Returns nan when not numeric.
        """
        s = str(raw or "").strip().lstrip(_CURRENCY_SYMBOLS)
        s = _WHITESPACE.sub("", s).replace(",", ".", 1)
        match = _LEADING_FLOAT.match(s)
        if not match:
            return math.nan
        return float(match.group(0))

    @staticmethod
    def quantize(value: float, places: int) -> float:
        """Arrondir a la precision de la colonne (demi vers le haut) /
        Round to the column precision (half up). nan et inf inchanges / unchanged."""
        if not math.isfinite(value):
            return value
        step = Decimal(1).scaleb(-places)
        return float(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))

    @classmethod
    def parse_price(cls, raw: str | None) -> float:
        """Prix c/L a 1 decimale / Price c/L to 1 decimal."""
        return cls.quantize(cls.parse_decimal(raw), 1)

    @classmethod
    def parse_cost(cls, raw: str | None) -> float:
        """Cout a 2 decimales / Cost to 2 decimals."""
        return cls.quantize(cls.parse_decimal(raw), 2)

    @staticmethod
    def parse_optional_integer(raw: str | None) -> int | None:
        """Garder les chiffres uniquement / Keep digits only. Vide -> None."""
        digits = _NON_DIGITS.sub("", str(raw or ""))
        if not digits:
            return None
        return int(digits)

    @staticmethod
    def parse_local_date(ymd: str | None, tz: tzinfo | None = None) -> datetime | None:
        """Convertir YYYY-MM-DD en datetime a midi local / Convert YYYY-MM-DD to a local-noon datetime.

        Midi evite un decalage d'un jour quand la date est affichee dans un autre fuseau.
        Noon avoids an off-by-one day when the date is rendered in another timezone.
        Sans tz, le fuseau local du systeme est utilise / Without tz, system local time is used.
        """
        if not ymd or not _YMD.fullmatch(ymd):
            return None
        try:
            day = date.fromisoformat(ymd)
        except ValueError:
            return None
        noon = datetime.combine(day, LOCAL_NOON)
        if tz is None:
            return noon.astimezone()
        return noon.replace(tzinfo=tz)

    @staticmethod
    def parse_reset_flag(raw: str | None) -> bool:
        """'true' ou 'yes' -> True, sinon False / 'true' or 'yes' -> True, else False."""
        return str(raw or "").strip().lower() in ("true", "yes")

    @staticmethod
    def clean_text(raw: str | None) -> str | None:
        text = str(raw or "").strip()
        return text or None

    @classmethod
    def parse_fill_form(cls, form: FillForm, tz: tzinfo | None = None) -> ParsedFill:
        """Parser tous les champs d'un formulaire / Parse every field of a form."""
        return ParsedFill(
            filled_at=cls.parse_local_date(form.date, tz) if form.date else None,
            price_cents_per_liter=cls.parse_price(form.price),
            total_cost_eur=cls.parse_cost(form.cost),
            range_remaining_km=cls.parse_optional_integer(form.range),
            station_name=cls.clean_text(form.station),
            reset_trip=cls.parse_reset_flag(form.reset),
            note=cls.clean_text(form.note),
        )
