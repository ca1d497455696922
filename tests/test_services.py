"""Tests des services / Service tests."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from diesel_tracker.schemas.fill import FillForm
from diesel_tracker.services.export_service import CSV_HEADERS, ExportService
from diesel_tracker.services.fill_parser import FillParserService
from diesel_tracker.services.fill_validator import (
    INVALID_FILL_MESSAGE,
    FillValidationError,
    FillValidatorService,
)
from diesel_tracker.services.station_service import StationService
from diesel_tracker.services.summary_service import SummaryService


@dataclass
class FakeFill:
    filled_at: datetime
    price_cents_per_liter: float
    total_cost_eur: float
    range_remaining_km: int | None = None
    station_name: str | None = None
    reset_trip: bool = False
    note: str | None = None
    created_at: datetime | None = None


# --- Parser ---

def test_parse_decimal_comma_and_period():
    assert FillParserService.parse_decimal("169,9") == 169.9
    assert FillParserService.parse_decimal("169.9") == 169.9


def test_parse_decimal_currency_and_whitespace():
    assert FillParserService.parse_decimal("€70.00") == 70.0
    assert FillParserService.parse_decimal("  € 70,50 ") == 70.5


def test_parse_decimal_not_a_number():
    assert not math.isfinite(FillParserService.parse_decimal("not a number"))
    assert math.isnan(FillParserService.parse_decimal(""))
    assert math.isnan(FillParserService.parse_decimal(None))


def test_parse_decimal_leading_number_prefix():
    assert FillParserService.parse_decimal("70.00eur") == 70.0


@pytest.mark.parametrize("raw,expected", [
    ("169.95", 170.0),
    ("169,94", 169.9),
    ("0.04", 0.0),
    ("0.05", 0.1),
])
def test_parse_price_rounds_to_one_decimal(raw, expected):
    assert FillParserService.parse_price(raw) == expected


def test_parse_cost_rounds_to_two_decimals():
    assert FillParserService.parse_cost("70.005") == 70.01
    assert FillParserService.parse_cost("€ 70,004") == 70.0
    assert math.isnan(FillParserService.parse_cost("abc"))


def test_parse_optional_integer():
    assert FillParserService.parse_optional_integer("") is None
    assert FillParserService.parse_optional_integer(None) is None
    assert FillParserService.parse_optional_integer("km") is None
    assert FillParserService.parse_optional_integer("95 km") == 95
    assert FillParserService.parse_optional_integer("1 250") == 1250


def test_parse_local_date_noon():
    tz = ZoneInfo("Europe/Dublin")
    dt = FillParserService.parse_local_date("2025-06-15", tz)
    assert dt is not None
    assert (dt.year, dt.month, dt.day, dt.hour, dt.minute) == (2025, 6, 15, 12, 0)
    assert dt.tzinfo is tz


def test_parse_local_date_system_local():
    dt = FillParserService.parse_local_date("2025-06-15")
    assert dt is not None
    assert dt.tzinfo is not None
    assert dt.hour == 12


def test_parse_local_date_keeps_day_across_timezones():
    dt = FillParserService.parse_local_date("2025-01-10", ZoneInfo("Pacific/Auckland"))
    assert dt.astimezone(timezone.utc).date().isoformat() == "2025-01-09"
    dt = FillParserService.parse_local_date("2025-01-10", ZoneInfo("America/Los_Angeles"))
    assert dt.astimezone(timezone.utc).date().isoformat() == "2025-01-10"


@pytest.mark.parametrize("raw", ["2025-6-15", "", "15/06/2025", "2025-13-01", "2025-02-30", None])
def test_parse_local_date_rejects(raw):
    assert FillParserService.parse_local_date(raw) is None


def test_parse_reset_flag():
    assert FillParserService.parse_reset_flag("true") is True
    assert FillParserService.parse_reset_flag("YES") is True
    assert FillParserService.parse_reset_flag("false") is False
    assert FillParserService.parse_reset_flag(None) is False


def test_parse_fill_form_sub_precision_price_is_invalid():
    form = FillForm(date="2025-01-10", price="0.04", cost="10")
    parsed = FillParserService.parse_fill_form(form, timezone.utc)
    assert parsed.price_cents_per_liter == 0.0
    assert not FillValidatorService.is_valid(
        parsed.filled_at, parsed.price_cents_per_liter, parsed.total_cost_eur)


def test_parse_fill_form():
    form = FillForm(date="2025-01-10", price="169,9", cost="€70", range="500 km",
                    station="  Shell ", reset="yes", note="   ")
    parsed = FillParserService.parse_fill_form(form, timezone.utc)
    assert parsed.filled_at == datetime(2025, 1, 10, 12, tzinfo=timezone.utc)
    assert parsed.price_cents_per_liter == 169.9
    assert parsed.total_cost_eur == 70.0
    assert parsed.range_remaining_km == 500
    assert parsed.station_name == "Shell"
    assert parsed.reset_trip is True
    assert parsed.note is None


# --- Validator ---

VALID_DATE = datetime(2025, 6, 15, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize("filled_at,price,cost,field", [
    (VALID_DATE, 0, 10, "price"),
    (VALID_DATE, -1, 10, "price"),
    (VALID_DATE, float("nan"), 10, "price"),
    (VALID_DATE, 169.9, -0.01, "cost"),
    (VALID_DATE, 169.9, float("inf"), "cost"),
    (VALID_DATE, 100000, 10, "price"),
    (VALID_DATE, 169.9, 1000000, "cost"),
    (None, 169.9, 10, "date"),
])
def test_validator_rejects(filled_at, price, cost, field):
    with pytest.raises(FillValidationError) as excinfo:
        FillValidatorService.validate(filled_at, price, cost)
    assert str(excinfo.value) == INVALID_FILL_MESSAGE
    assert excinfo.value.fields == [field]


def test_validator_accepts_free_fill():
    assert FillValidatorService.validate(VALID_DATE, 169.9, 0) == (VALID_DATE, 169.9, 0)
    assert FillValidatorService.is_valid(VALID_DATE, 169.9, 0)


def test_validator_accepts_column_maximums():
    assert FillValidatorService.is_valid(VALID_DATE, 99999.9, 999999.99)


def test_validator_reports_every_field():
    assert FillValidatorService.invalid_fields(None, 0, -1) == ["date", "price", "cost"]


# --- CSV ---

SAMPLE = FakeFill(
    filled_at=datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc),
    price_cents_per_liter=169.9,
    total_cost_eur=70.00,
    range_remaining_km=500,
    station_name="Shell",
    reset_trip=True,
    note='He said "fill it"',
)


def test_csv_header():
    csv_text = ExportService.to_csv([])
    assert csv_text == ",".join(CSV_HEADERS)
    assert csv_text.startswith("Date,Price (c/L),Total Cost,Estimated Liters,Range Remaining,Garage")


def test_csv_row():
    lines = ExportService.to_csv([SAMPLE]).split("\n")
    assert len(lines) == 2
    assert '169.9,70.00,41.20,500,Shell,Yes,"He said ""fill it"""' in lines[1]
    assert lines[1].startswith("10/01/2025,")
    # created_at absent -> filled_at
    assert lines[1].endswith(",2025-01-10T12:00:00.000Z")


def test_csv_zero_price_blank_liters():
    fill = FakeFill(filled_at=SAMPLE.filled_at, price_cents_per_liter=0, total_cost_eur=50)
    row = ExportService.fill_to_row(fill)
    assert row[3] == ""
    assert row[1] == "0.0"


def test_csv_free_fill_and_blanks():
    fill = FakeFill(filled_at=SAMPLE.filled_at, price_cents_per_liter=170, total_cost_eur=0,
                    created_at=datetime(2025, 1, 11, 8, 30))
    row = ExportService.fill_to_row(fill)
    assert row[2:8] == ["0.00", "", "", "", "No", ""]
    assert row[8] == "2025-01-11T08:30:00.000Z"


def test_csv_zero_range_is_kept():
    fill = FakeFill(filled_at=SAMPLE.filled_at, price_cents_per_liter=170, total_cost_eur=60,
                    range_remaining_km=0)
    assert ExportService.fill_to_row(fill)[4] == "0"


def test_csv_station_with_comma_is_quoted():
    fill = FakeFill(filled_at=SAMPLE.filled_at, price_cents_per_liter=170, total_cost_eur=60,
                    station_name="Circle K, Naas Road")
    assert ExportService.fill_to_row(fill)[5] == '"Circle K, Naas Road"'


def test_csv_date_in_display_timezone():
    fill = FakeFill(filled_at=datetime(2025, 1, 9, 23, 0), price_cents_per_liter=170, total_cost_eur=60)
    row = ExportService.fill_to_row(fill, ZoneInfo("Pacific/Auckland"), "%Y-%m-%d")
    assert row[0] == "2025-01-10"


def test_csv_preserves_order():
    older = FakeFill(filled_at=datetime(2025, 1, 1, 12, tzinfo=timezone.utc),
                     price_cents_per_liter=160, total_cost_eur=40)
    lines = ExportService.to_csv([SAMPLE, older]).split("\n")
    assert lines[1].startswith("10/01/2025")
    assert lines[2].startswith("01/01/2025")


def test_export_filename():
    name = ExportService.export_filename("diesel-tracker", "csv", datetime(2025, 3, 4).date())
    assert name == "diesel-tracker-export-2025-03-04.csv"


def test_xlsx_export():
    from io import BytesIO

    from openpyxl import load_workbook

    content = ExportService.to_xlsx([SAMPLE])
    ws = load_workbook(BytesIO(content)).active
    assert [c.value for c in ws[1]] == CSV_HEADERS
    assert ws.cell(row=2, column=2).value == 169.9
    assert ws.cell(row=2, column=4).value == 41.2
    assert ws.cell(row=2, column=7).value == "Yes"


# --- Summary ---

def test_summary_empty():
    summary = SummaryService.summarize([])
    assert summary.total_spend == 0
    assert summary.average_price_per_liter == 0
    assert summary.total_liters == 0
    assert summary.count == 0


def test_summary_two_fills():
    fills = [
        FakeFill(filled_at=VALID_DATE, price_cents_per_liter=160, total_cost_eur=50.00),
        FakeFill(filled_at=VALID_DATE, price_cents_per_liter=180, total_cost_eur=70.00),
    ]
    summary = SummaryService.summarize(fills)
    assert summary.total_spend == 120.00
    assert summary.average_price_per_liter == 1.7
    assert summary.count == 2
    assert summary.total_liters == pytest.approx(50 / 1.6 + 70 / 1.8, abs=0.01)


def test_liters_zero_price():
    assert SummaryService.liters(0, 50) == 0.0
    assert SummaryService.liters(200, 50) == 25.0


# --- Stations ---

def test_rank_stations():
    base = ["Emo Kinnegad", "Applegreen Enfield", "Top Oil Enfield"]
    recent = ["Top Oil Enfield", "Shell Athlone", "Top Oil Enfield", "Shell Athlone", "Emo Kinnegad", None]
    top, rest = StationService.rank_stations(base, recent, top_n=2)
    assert top == ["Shell Athlone", "Top Oil Enfield"]
    assert rest == ["Applegreen Enfield", "Emo Kinnegad"]


def test_rank_stations_no_history():
    top, rest = StationService.rank_stations(["b", "A", "c"], [], top_n=3)
    assert top == []
    assert rest == ["A", "b", "c"]
