from __future__ import annotations

from ..extensions import db
from cloudbook.time_utils import to_iso_date


class Invoice(db.Model):
    """
    Sales invoice for a tenant.

    customer and items are denormalized JSON snapshots taken when the
    invoice is written:
    - customer: {"id": <customers.id>, "name": ..., ...}
    - items: [{"product": <name>, "product_id": <business id>, "quantity": n, ...}]

    Monetary columns are plain decimals in the tenant's currency.
    """
    __tablename__ = "invoices"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)

    invoice_id = db.Column(db.String(64), nullable=False)
    customer = db.Column(db.JSON, nullable=False)
    items = db.Column(db.JSON, nullable=False)

    invoice_date = db.Column(db.Date, nullable=True)
    due_date = db.Column(db.Date, nullable=True)

    subtotal = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=True)
    tax = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=True)
    discount = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=True)
    total = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=True)
    paid_amount = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=True)
    due_amount = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=True)

    pay_type = db.Column(db.String(32), nullable=True)
    sub_invoice = db.Column(db.JSON, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} invoice_id={self.invoice_id!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "invoice_id": self.invoice_id,
            "customer": self.customer,
            "items": self.items,
            "invoice_date": to_iso_date(self.invoice_date),
            "due_date": to_iso_date(self.due_date),
            "subtotal": self.subtotal,
            "tax": self.tax,
            "discount": self.discount,
            "total": self.total,
            "paid_amount": self.paid_amount,
            "due_amount": self.due_amount,
            "pay_type": self.pay_type,
            "sub_invoice": self.sub_invoice,
            "notes": self.notes,
        }
