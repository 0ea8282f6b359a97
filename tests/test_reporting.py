"""Tests for customer master exports."""
import io
import sys
import types

from openpyxl import load_workbook

from mdm_console.reporting.sinks import excel_bytes, push_to_google_sheets, rows_to_csv_text
from mdm_console.reporting.templates import CUSTOMER_HEADERS, customers_to_rows


def test_customer_rows_use_export_headers(sample_customers):
    rows = customers_to_rows(sample_customers)
    assert list(rows[0]) == CUSTOMER_HEADERS
    assert rows[0]["ID"] == "1"
    assert rows[0]["Created_At"] == "2026-10-02"
    assert rows[3]["Company"] == ""
    assert rows[3]["Created_At"] == ""


def test_csv_text_for_downloads(sample_customers):
    text = rows_to_csv_text(customers_to_rows(sample_customers[:1]))
    assert text.splitlines()[0] == ",".join(CUSTOMER_HEADERS)
    assert "Acme Corporation" in text


def test_excel_bytes_builds_customer_workbook(sample_customers):
    data = excel_bytes(customers_to_rows(sample_customers))
    sheet = load_workbook(io.BytesIO(data)).active
    assert sheet.title == "customers"
    assert sheet.max_row - 1 == 4
    assert [cell.value for cell in sheet[1]] == CUSTOMER_HEADERS
    assert sheet["B2"].value == "Acme Corporation"


def test_push_to_google_sheets_replaces_worksheet(monkeypatch, fake_service_account_file, sample_customers):
    """Sheets export should clear the worksheet, then append headers and rows."""

    calls = {}

    class FakeWorksheet:
        def clear(self):
            calls["cleared"] = True

        def append_rows(self, values):
            calls["values"] = values

    class FakeSpreadsheet:
        def worksheet(self, title):
            calls["worksheet"] = title
            return FakeWorksheet()

    class FakeClient:
        def open_by_key(self, key):
            calls["key"] = key
            return FakeSpreadsheet()

    def service_account(filename=None):
        calls["filename"] = filename
        return FakeClient()

    monkeypatch.setitem(sys.modules, "gspread", types.SimpleNamespace(service_account=service_account))

    pushed = push_to_google_sheets(
        customers_to_rows(sample_customers),
        spreadsheet_id="sheet-123",
        worksheet_title="Master",
        service_account_path=fake_service_account_file,
    )

    assert pushed == 4
    assert calls["filename"] == str(fake_service_account_file)
    assert calls["key"] == "sheet-123"
    assert calls["worksheet"] == "Master"
    assert calls["cleared"]
    assert calls["values"][0] == CUSTOMER_HEADERS
    assert len(calls["values"]) == 5


def test_push_with_no_rows_is_a_no_op(monkeypatch):
    monkeypatch.setitem(sys.modules, "gspread", None)
    assert push_to_google_sheets([], spreadsheet_id="sheet-123") == 0


def test_reporting_exposes_download_and_sheets_exports_only():
    import mdm_console.reporting as reporting

    assert set(reporting.__all__) >= {"excel_bytes", "rows_to_csv_text", "push_to_google_sheets"}
    assert not hasattr(reporting.sinks, "write_csv")
    assert not hasattr(reporting.sinks, "write_excel")
