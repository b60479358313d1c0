from __future__ import annotations

from ..extensions import db


class Customer(db.Model):
    """
    Customer master data for a tenant.

    Invoices embed a snapshot of the customer (see Invoice.customer), so
    editing or deleting a customer never rewrites past invoices.
    """
    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)

    customer_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    delivery = db.Column(db.Text, nullable=False)
    email = db.Column(db.String(255), nullable=False)
    contact = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(32), nullable=True)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} customer_id={self.customer_id!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "customer_id": self.customer_id,
            "name": self.name,
            "delivery": self.delivery,
            "email": self.email,
            "contact": self.contact,
            "status": self.status,
        }
