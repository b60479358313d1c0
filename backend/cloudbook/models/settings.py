from __future__ import annotations

from ..extensions import db


class Currency(db.Model):
    """Tenant display currency (e.g. "USD"). One row per tenant."""
    __tablename__ = "currencies"
    __table_args__ = (
        db.UniqueConstraint("user_id", name="uq_currencies_user"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)
    currency = db.Column(db.JSON, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "user_id": self.user_id, "currency": self.currency}


class General(db.Model):
    """
    Option lists that drive the tenant's forms: employee departments and
    roles, product categories and attribute choices. One row per tenant.
    """
    __tablename__ = "generals"
    __table_args__ = (
        db.UniqueConstraint("user_id", name="uq_generals_user"),
        {"sqlite_autoincrement": True},
    )

    OPTION_FIELDS = ("department", "role", "category", "size", "color", "material", "weight")

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)
    department = db.Column(db.JSON, nullable=False)
    role = db.Column(db.JSON, nullable=False)
    category = db.Column(db.JSON, nullable=False)
    size = db.Column(db.JSON, nullable=True)
    color = db.Column(db.JSON, nullable=True)
    material = db.Column(db.JSON, nullable=True)
    weight = db.Column(db.JSON, nullable=True)

    def to_dict(self) -> dict:
        data = {"id": self.id, "user_id": self.user_id}
        for key in self.OPTION_FIELDS:
            data[key] = getattr(self, key)
        return data


class Terms(db.Model):
    """Invoice terms & conditions lines. One row per tenant."""
    __tablename__ = "terms"
    __table_args__ = (
        db.UniqueConstraint("user_id", name="uq_terms_user"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)
    terms = db.Column(db.JSON, nullable=False)


class PermissionSet(db.Model):
    """
    Role -> module visibility matrix for a tenant's employees.

    permissions is a JSON list: [{"role": "Cashier", "allowedModules": ["invoices", ...]}].
    Admins always see every module and are not listed.
    """
    __tablename__ = "permissions"
    __table_args__ = (
        db.UniqueConstraint("user_id", name="uq_permissions_user"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)
    permissions = db.Column(db.JSON, nullable=False)
