# Overview: Flask API routes for invoices operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import invoices_service
from ..validation import is_missing
from .responses import error_response, fail, ok


invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.get("")
def list_invoices_route():
    try:
        return ok(invoices_service.list_invoices(request.args.get("user_id")))
    except Exception as e:
        return error_response(e, "Failed to list invoices")


@invoices_bp.post("")
def create_invoice_route():
    """
    Create an invoice.

    customer and items are stored as JSON snapshots; invoice_date and
    due_date are ISO dates; amounts are numbers or numeric strings.
    """
    try:
        invoice = invoices_service.create_invoice(request.get_json(silent=True))
        return ok(message="Invoice added successfully", status=201, invoiceId=invoice.id)
    except Exception as e:
        return error_response(e, "Failed to add invoice")


@invoices_bp.put("")
def update_invoice_route():
    try:
        invoices_service.update_invoice(request.get_json(silent=True))
        return ok(message="Invoice updated successfully")
    except Exception as e:
        return error_response(e, "Failed to update invoice")


@invoices_bp.delete("")
def delete_invoice_route():
    try:
        invoices_service.delete_invoice(request.get_json(silent=True))
        return ok(message="Invoice deleted successfully")
    except Exception as e:
        return error_response(e, "Failed to delete invoice")


@invoices_bp.get("/single-invoice")
def single_invoice_route():
    """Query params: id (required) - invoices.id"""
    try:
        invoice_id = request.args.get("id")
        if is_missing(invoice_id):
            return fail("Invoice ID is required", 400)
        return ok(invoices_service.get_invoice(invoice_id))
    except Exception as e:
        return error_response(e, "Failed to fetch invoice")


@invoices_bp.get("/customer-invoices")
def customer_invoices_route():
    """
    Invoices of one customer.

    Query params:
    - id: int (optional) - customers.id as recorded in the invoice's
      customer snapshot. Without it every invoice is returned.
    """
    try:
        return ok(invoices_service.list_customer_invoices(request.args.get("id")))
    except Exception as e:
        return error_response(e, "Failed to fetch customer invoices")
