"""Export destinations for customer rows: CSV, Excel and Google Sheets."""
import csv
import io
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from mdm_console.reporting.templates import CUSTOMER_HEADERS

logger = logging.getLogger(__name__)


def rows_to_csv_text(rows: Iterable[Dict[str, Any]]) -> str:
    """Serialize rows to CSV text, used for browser downloads."""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CUSTOMER_HEADERS)
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def excel_bytes(rows: Iterable[Dict[str, Any]]) -> bytes:
    """Render rows as an Excel workbook using openpyxl, for browser downloads."""

    rows = list(rows)

    try:
        from openpyxl import Workbook
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel exports") from exc

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "customers"
    sheet.append(CUSTOMER_HEADERS)
    for row in rows:
        sheet.append([row.get(header, "") for header in CUSTOMER_HEADERS])
    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.info("Wrote %d customer rows to Excel", len(rows))
    return buffer.getvalue()


def push_to_google_sheets(
    rows: Iterable[Dict[str, Any]],
    spreadsheet_id: str,
    worksheet_title: str = "Customers",
    service_account_path: Path | None = None,
) -> int:
    """Replace a worksheet's contents with the rows; returns the number pushed."""

    rows = list(rows)
    if not rows:
        return 0

    try:
        import gspread
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("gspread is required for Google Sheets exports") from exc

    client = (
        gspread.service_account(filename=str(service_account_path))
        if service_account_path
        else gspread.service_account()
    )
    worksheet = client.open_by_key(spreadsheet_id).worksheet(worksheet_title)
    worksheet.clear()
    values: List[List[Any]] = [list(CUSTOMER_HEADERS)]
    values.extend([row.get(header, "") for header in CUSTOMER_HEADERS] for row in rows)
    worksheet.append_rows(values)
    logger.info("Pushed %d customer rows to worksheet %s", len(rows), worksheet_title)
    return len(rows)
