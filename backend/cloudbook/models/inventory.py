from __future__ import annotations

from ..extensions import db


class Product(db.Model):
    """
    One physical stock unit of a product.

    product_id is the business identifier and is NOT unique: a product with
    five units on hand is five rows sharing the same product_id, each with
    stock = 1. Stock on hand is therefore COUNT(*) per product_id.

    attribute is a JSON list of {"name": ..., "value": ...} pairs
    (size, color, material, weight, ...).
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_user_product", "user_id", "product_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("admin.id", ondelete="CASCADE"), nullable=False, index=True)

    product_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=False)
    category = db.Column(db.String(128), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=1)
    unit = db.Column(db.String(32), nullable=False)
    attribute = db.Column(db.JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id} product_id={self.product_id!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "stock": self.stock,
            "unit": self.unit,
            "attribute": self.attribute if self.attribute is not None else [],
        }
