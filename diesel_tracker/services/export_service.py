"""
Service d'export CSV/Excel des pleins / Fill CSV/Excel export service.
Les regles de format sont definies ici une seule fois.
Formatting rules are defined here once.
"""

import io
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Iterable

from openpyxl import Workbook

from diesel_tracker.utils.dates import as_utc, iso_instant

CSV_HEADERS = [
    "Date",
    "Price (c/L)",
    "Total Cost",
    "Estimated Liters",
    "Range Remaining",
    "Garage",
    "Reset Trip",
    "Note",
    "Created At",
]

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _escape(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _csv_field(value: str) -> str:
    """Citer seulement si necessaire / Quote only when needed."""
    if any(c in value for c in ',"\r\n'):
        return _escape(value)
    return value


class ExportService:
    """Export des pleins vers CSV/XLSX / Fill export to CSV/XLSX."""

    @staticmethod
    def estimated_liters(price_cents_per_liter: Any, total_cost_eur: Any) -> str:
        """Litres estimes a 2 decimales, vide si prix ou cout <= 0 /
        Estimated liters to 2 decimals, blank when price or cost is not positive."""
        price = float(price_cents_per_liter or 0)
        cost = float(total_cost_eur or 0)
        if price <= 0 or cost <= 0:
            return ""
        return f"{cost / price * 100:.2f}"

    @staticmethod
    def fill_to_row(fill: Any, tz: tzinfo = timezone.utc, date_format: str = "%d/%m/%Y") -> list[str]:
        """Convertir un plein en cellules texte / Convert a fill to text cells."""
        filled_at: datetime = fill.filled_at
        created_at: datetime | None = getattr(fill, "created_at", None)
        range_km = fill.range_remaining_km
        return [
            as_utc(filled_at).astimezone(tz).strftime(date_format),
            f"{float(fill.price_cents_per_liter):.1f}",
            f"{float(fill.total_cost_eur):.2f}",
            ExportService.estimated_liters(fill.price_cents_per_liter, fill.total_cost_eur),
            # 0 km reste "0", seule une autonomie absente est vide / 0 km stays "0", only a missing range is blank
            "" if range_km is None else str(range_km),
            _csv_field(fill.station_name) if fill.station_name else "",
            "Yes" if fill.reset_trip else "No",
            _escape(fill.note) if fill.note else "",
            iso_instant(created_at or filled_at),
        ]

    @staticmethod
    def to_csv(fills: Iterable[Any], tz: tzinfo = timezone.utc, date_format: str = "%d/%m/%Y") -> str:
        """Generer le CSV, ordre conserve / Generate the CSV, caller's order preserved.

        Fonction pure: pas d'I/O / Pure function: no I/O.
        """
        lines = [",".join(CSV_HEADERS)]
        for fill in fills:
            lines.append(",".join(ExportService.fill_to_row(fill, tz, date_format)))
        return "\n".join(lines)

    @staticmethod
    def to_xlsx(fills: Iterable[Any], tz: tzinfo = timezone.utc, sheet_name: str = "Fills") -> bytes:
        """Generer un fichier Excel / Generate an Excel file."""
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name

        # En-têtes / Headers
        for col_idx, header in enumerate(CSV_HEADERS, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = cell.font.copy(bold=True)

        # Données typées / Typed data rows
        for row_idx, fill in enumerate(fills, 2):
            liters = ExportService.estimated_liters(fill.price_cents_per_liter, fill.total_cost_eur)
            created_at = getattr(fill, "created_at", None) or fill.filled_at
            values = [
                as_utc(fill.filled_at).astimezone(tz).date(),
                round(float(fill.price_cents_per_liter), 1),
                round(float(fill.total_cost_eur), 2),
                float(liters) if liters else None,
                fill.range_remaining_km,
                fill.station_name,
                "Yes" if fill.reset_trip else "No",
                fill.note,
                iso_instant(created_at),
            ]
            for col_idx, value in enumerate(values, 1):
                ws.cell(row=row_idx, column=col_idx, value=value)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    @staticmethod
    def export_filename(app_slug: str, extension: str, today: date) -> str:
        """Nom de fichier date / Date-stamped filename."""
        return f"{app_slug}-export-{today.isoformat()}.{extension}"
