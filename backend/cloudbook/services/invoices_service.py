# Overview: Service-layer operations for invoices; dates and amounts are normalized before storage.

"""
Invoices Service

customer and items are stored as JSON snapshots. Dates arrive as
"YYYY-MM-DD" (or a full ISO datetime) and monetary amounts as numbers or
numeric strings; both are normalized here so the columns hold real dates
and decimals.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Invoice
from ..time_utils import parse_iso_date
from ..validation import (
    NotFoundError,
    ResourcePolicy,
    ValidationError,
    parse_int,
    parse_number,
)
from . import resource_service

AMOUNT_FIELDS = ("subtotal", "tax", "discount", "total", "paid_amount", "due_amount")
DATE_FIELDS = ("invoice_date", "due_date")

INVOICE_POLICY = ResourcePolicy(
    required_on_create=("user_id", "invoice_id", "customer", "items"),
    editable_fields=(
        "invoice_id", "customer", "items", "invoice_date", "due_date",
        "subtotal", "tax", "discount", "total", "paid_amount", "due_amount",
        "pay_type", "sub_invoice", "notes",
    ),
    required_on_update=("invoice_id", "customer", "items"),
    json_fields=frozenset({"customer", "items", "sub_invoice"}),
)


def _normalize(cleaned: dict) -> dict:
    if not isinstance(cleaned.get("customer"), dict):
        raise ValidationError("customer must be an object")
    if not isinstance(cleaned.get("items"), list):
        raise ValidationError("items must be an array")

    for key in DATE_FIELDS:
        try:
            cleaned[key] = parse_iso_date(cleaned.get(key))
        except ValueError:
            raise ValidationError(f"{key} must be an ISO date")

    for key in AMOUNT_FIELDS:
        cleaned[key] = parse_number(cleaned.get(key), key)
    return cleaned


def list_invoices(user_id=None) -> list[dict]:
    return resource_service.list_records(Invoice, user_id, label="Invoice")


def get_invoice(invoice_id) -> dict:
    """Single invoice by primary key."""
    invoice = db.session.get(Invoice, parse_int(invoice_id, "id"))
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice.to_dict()


def list_customer_invoices(customer_id=None) -> list[dict]:
    """
    Invoices whose customer snapshot has this customers.id.

    Without a customer id every invoice is returned.
    """
    query = db.session.query(Invoice).order_by(Invoice.id.asc())
    if customer_id in (None, ""):
        return [i.to_dict() for i in query.all()]

    cid = parse_int(customer_id, "id")
    invoices = query.filter(Invoice.customer["id"].as_integer() == cid).all()
    if not invoices:
        raise NotFoundError("No invoices found for this customer")
    return [i.to_dict() for i in invoices]


def create_invoice(payload) -> Invoice:
    return resource_service.create_record(Invoice, payload, policy=INVOICE_POLICY, prepare=_normalize)


def update_invoice(payload) -> Invoice:
    return resource_service.update_record(
        Invoice, payload, policy=INVOICE_POLICY, label="Invoice", prepare=_normalize
    )


def delete_invoice(payload) -> None:
    resource_service.delete_record(Invoice, payload, label="Invoice")
