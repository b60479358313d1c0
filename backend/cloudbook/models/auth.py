from __future__ import annotations

from ..extensions import db
from cloudbook.time_utils import to_utc_z


class Admin(db.Model):
    """
    Tenant root account.

    MULTI-TENANT: every customer, employee, product, invoice and settings
    row carries user_id = admin.id. Deleting an admin deletes its tenant.

    OTP state lives on the row: otp holds the SHA-256 hex of the pending
    code and otp_expires_at its deadline; both are NULL when no code is
    pending.
    """
    __tablename__ = "admin"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    last_name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    contact = db.Column(db.String(64), nullable=False)
    company = db.Column(db.String(255), nullable=False)
    address = db.Column(db.Text, nullable=False)
    role = db.Column(db.String(64), nullable=False)

    # Bcrypt hashed password
    password = db.Column(db.String(255), nullable=False)

    # Public URL paths of uploaded files
    image = db.Column(db.String(512), nullable=True)
    logo = db.Column(db.String(512), nullable=True)

    otp = db.Column(db.String(64), nullable=True)
    otp_expires_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    employees = db.relationship("Employee", backref="admin", cascade="all, delete-orphan")
    customers = db.relationship("Customer", backref="admin", cascade="all, delete-orphan")
    products = db.relationship("Product", backref="admin", cascade="all, delete-orphan")
    invoices = db.relationship("Invoice", backref="admin", cascade="all, delete-orphan")
    currency = db.relationship("Currency", backref="admin", cascade="all, delete-orphan")
    generals = db.relationship("General", backref="admin", cascade="all, delete-orphan")
    terms = db.relationship("Terms", backref="admin", cascade="all, delete-orphan")
    permissions = db.relationship("PermissionSet", backref="admin", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Admin id={self.id} email={self.email!r}>"

    def profile_claims(self) -> dict:
        """Fields embedded in the admin's auth token and login payload."""
        return {
            "id": self.id,
            "name": self.name,
            "last_name": self.last_name,
            "email": self.email,
            "contact": self.contact,
            "company": self.company,
            "address": self.address,
            "role": self.role,
            "image": self.image,
            "logo": self.logo,
        }

    def to_dict(self) -> dict:
        # Never expose the password hash or OTP state.
        data = self.profile_claims()
        data["created_at"] = to_utc_z(self.created_at)
        return data


class Employee(db.Model):
    """Staff account belonging to one admin tenant; logs in with its own password."""
    __tablename__ = "employees"
    __table_args__ = (
        db.UniqueConstraint("user_id", "email", name="uq_employees_user_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)

    employee_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    contact = db.Column(db.String(64), nullable=False)
    department = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(32), nullable=False)

    # Bcrypt hashed password
    password = db.Column(db.String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Employee id={self.id} email={self.email!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "employee_id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "contact": self.contact,
            "department": self.department,
            "role": self.role,
            "status": self.status,
        }
