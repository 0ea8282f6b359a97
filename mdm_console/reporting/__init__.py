"""Customer master exports."""
from mdm_console.reporting.sinks import (
    excel_bytes,
    push_to_google_sheets,
    rows_to_csv_text,
)
from mdm_console.reporting.templates import CUSTOMER_HEADERS, customer_to_row, customers_to_rows

__all__ = [
    "CUSTOMER_HEADERS",
    "customer_to_row",
    "customers_to_rows",
    "excel_bytes",
    "push_to_google_sheets",
    "rows_to_csv_text",
]
