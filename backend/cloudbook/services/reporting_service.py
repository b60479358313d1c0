# Overview: Service-layer operations for reporting; dashboard aggregates for one tenant.

from __future__ import annotations

import calendar
from collections import OrderedDict
from datetime import date

from sqlalchemy import func

from ..extensions import db
from ..models import Customer, Invoice, Product
from ..time_utils import utcnow
from ..validation import ValidationError, is_missing, parse_int
from .settings_service import tenant_currency
from .tenant_service import require_tenant

MONTHS_IN_CHART = 12


def _month_window(today: date) -> list[tuple[int, int]]:
    """(year, month) pairs for the last 12 calendar months, oldest first."""
    months = []
    year, month = today.year, today.month
    for _ in range(MONTHS_IN_CHART):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def _as_float(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def monthly_revenue(user_id: int, today: date | None = None) -> list[dict]:
    """paid_amount summed by invoice_date month over the 12-month window."""
    today = today or utcnow().date()
    window = _month_window(today)
    first_year, first_month = window[0]

    rows = (
        db.session.query(Invoice.invoice_date, Invoice.paid_amount)
        .filter(
            Invoice.user_id == user_id,
            Invoice.invoice_date.isnot(None),
            Invoice.invoice_date >= date(first_year, first_month, 1),
        )
        .all()
    )

    buckets: "OrderedDict[tuple[int, int], float]" = OrderedDict((ym, 0.0) for ym in window)
    for invoice_date, paid in rows:
        key = (invoice_date.year, invoice_date.month)
        if key in buckets:
            buckets[key] += _as_float(paid)

    return [
        {"name": calendar.month_abbr[month], "year": year, "month": month, "amount": round(amount, 2)}
        for (year, month), amount in buckets.items()
    ]


def product_sales(user_id: int) -> list[dict]:
    """
    Units sold per (product name, product_id) across all invoice line
    items, most sold first. Items without a numeric quantity count as 0.
    """
    totals: dict[tuple[str, str], float] = {}
    for (items,) in db.session.query(Invoice.items).filter(Invoice.user_id == user_id).all():
        if not isinstance(items, list):
            continue
        for item in items:
            if not isinstance(item, dict):
                continue
            key = (str(item.get("product") or ""), str(item.get("product_id") or ""))
            totals[key] = totals.get(key, 0.0) + _as_float(item.get("quantity"))

    ranked = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    return [{"name": name, "product_id": pid, "value": qty} for (name, pid), qty in ranked]


def dashboard(user_id, today: date | None = None) -> dict:
    """
    Headline metrics plus the two dashboard charts.

    Raises:
        ValidationError: user_id missing
        NotFoundError: tenant does not exist
    """
    if is_missing(user_id):
        raise ValidationError("User ID is required")
    uid = parse_int(user_id, "user_id")
    require_tenant(uid)

    paid, due = (
        db.session.query(
            func.coalesce(func.sum(Invoice.paid_amount), 0),
            func.coalesce(func.sum(Invoice.due_amount), 0),
        )
        .filter(Invoice.user_id == uid)
        .one()
    )
    total_products = (
        db.session.query(func.count(func.distinct(Product.product_id)))
        .filter(Product.user_id == uid)
        .scalar()
    )
    total_customers = db.session.query(func.count(Customer.id)).filter(Customer.user_id == uid).scalar()

    return {
        "total_revenue": round(_as_float(paid), 2),
        "total_due": round(_as_float(due), 2),
        "total_products": int(total_products or 0),
        "total_customers": int(total_customers or 0),
        "currency": tenant_currency(uid),
        "monthly_revenue": monthly_revenue(uid, today),
        "product_sales": product_sales(uid),
    }
