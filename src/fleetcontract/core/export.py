"""Spreadsheet export of a contract request."""

import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from fleetcontract.exceptions import ExportError
from fleetcontract.models.draft import Draft

logger = logging.getLogger(__name__)

TITLE = "FLEET MAINTENANCE CONTRACT REQUEST"
SHEET_TITLE = "Contract Request"
SPACER = "|"

VEHICLE_HEADERS = [
    "No.",
    "Make",
    "Model",
    "Plate",
    "VIN",
    "Year",
    "Current km",
    "Operation type",
    SPACER,
    "Duration (months)",
    "Contract total km",
    "Start date",
    "Notes",
]

# Approximate character widths, one per vehicle column
COLUMN_WIDTHS = [5, 15, 20, 15, 22, 8, 12, 25, 3, 15, 18, 15, 40]

HEADER_FILL = PatternFill(start_color="1F3A5F", end_color="1F3A5F", fill_type="solid")


def company_slug(company_name: str) -> str:
    """File-name-safe company name; "client" when empty."""
    return re.sub(r"[^a-z0-9]", "_", company_name, flags=re.IGNORECASE).lower() or "client"


def export_filename(draft: Draft, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"contract_request_{company_slug(draft.client.company_name)}_{today.isoformat()}.xlsx"


def build_rows(draft: Draft) -> list[list]:
    """Sheet content as a list of rows.

    Layout: title, client block, contact block, then the vehicle table with
    technical and contract columns split by a spacer column.
    """
    client = draft.client
    rows: list[list] = [
        [TITLE],
        [],
        ["CLIENT DETAILS"],
        ["Company name", client.company_name],
        ["Tax ID (NIF)", client.tax_id],
        ["Province", client.province],
        ["Address", client.address],
        ["General email", client.company_email or "-"],
        [],
        ["Contact", client.contact_name],
        ["Role", client.contact_role],
        ["Contact email", client.contact_email],
        ["Contact phone", client.contact_phone],
        [],
        ["FLEET & CONTRACT TERMS"],
        list(VEHICLE_HEADERS),
    ]
    for index, v in enumerate(draft.vehicles, 1):
        rows.append([
            index,
            v.make,
            v.model,
            v.plate,
            v.vin,
            v.year,
            v.odometer,
            v.operation_type,
            SPACER,
            v.duration_months,
            v.total_distance,
            v.start_date,
            v.notes or "-",
        ])
    rows.append([])
    return rows


def build_workbook(draft: Draft) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    rows = build_rows(draft)
    for row in rows:
        ws.append(row)

    ws.cell(row=1, column=1).font = Font(bold=True, size=14)
    bold = Font(bold=True)
    header_row = rows.index(VEHICLE_HEADERS) + 1
    for row_number, row in enumerate(rows, 1):
        if len(row) == 1 and row_number > 1:
            ws.cell(row=row_number, column=1).font = bold

    for col in range(1, len(VEHICLE_HEADERS) + 1):
        cell = ws.cell(row=header_row, column=col)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for col, width in enumerate(COLUMN_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(col)].width = width

    return wb


def export_workbook(draft: Draft, directory: Path, today: Optional[date] = None) -> Path:
    """Write the request spreadsheet into a directory.

    Args:
        draft: A validated draft
        directory: Target directory (created if missing)
        today: Date used in the file name

    Returns:
        Path of the written .xlsx file

    Raises:
        ExportError: If the file cannot be written
    """
    path = Path(directory) / export_filename(draft, today)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        build_workbook(draft).save(path)
    except OSError as e:
        raise ExportError(str(path), str(e)) from e
    logger.info("Exported %d vehicle(s) to %s", len(draft.vehicles), path)
    return path
