"""Flat row layout used when exporting the customer master."""
from typing import Any, Dict, Iterable, List

from mdm_console.core.models import Customer
from mdm_console.core.utils import clean_text

CUSTOMER_HEADERS = [
    "ID",
    "Name",
    "Company",
    "GST_Number",
    "PAN_Number",
    "Email",
    "Phone",
    "Address",
    "Created_At",
]


def customer_to_row(customer: Customer) -> Dict[str, Any]:
    """Map a customer onto the export headers with normalized whitespace."""

    return {
        "ID": "" if customer.id is None else str(customer.id),
        "Name": clean_text(customer.name),
        "Company": clean_text(customer.company),
        "GST_Number": clean_text(customer.gst_number),
        "PAN_Number": clean_text(customer.pan_number),
        "Email": clean_text(customer.email_address),
        "Phone": clean_text(customer.phone_number),
        "Address": clean_text(customer.address),
        "Created_At": customer.created_at.strftime("%Y-%m-%d") if customer.created_at else "",
    }


def customers_to_rows(customers: Iterable[Customer]) -> List[Dict[str, Any]]:
    return [customer_to_row(customer) for customer in customers]
