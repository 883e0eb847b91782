from __future__ import annotations

import os
import time
from datetime import datetime

from sqlalchemy import Index

from storefront.app.extensions import db


def new_object_id() -> str:
    """24-hex-char id whose lexicographic order follows creation time.

    4-byte big-endian unix seconds followed by 8 random bytes, so sorting
    ids descending lists the newest records first.
    """
    return int(time.time()).to_bytes(4, "big").hex() + os.urandom(8).hex()


product_categories = db.Table(
    "product_categories",
    db.Column("product_id", db.String(24), db.ForeignKey("products.id"), primary_key=True),
    db.Column("category_id", db.String(24), db.ForeignKey("categories.id"), primary_key=True),
)


class Business(db.Model):
    __tablename__ = "businesses"

    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # top-level categories only; children hang off each category
    categories = db.relationship(
        "Category",
        primaryjoin="and_(Category.business_id == Business.id, Category.parent_id.is_(None))",
        order_by="Category.position",
        viewonly=True,
        lazy="select",
    )


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    business_id = db.Column(db.String(24), db.ForeignKey("businesses.id"), nullable=False, index=True)
    parent_id = db.Column(db.String(24), db.ForeignKey("categories.id"), nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)

    business = db.relationship("Business", lazy="joined")
    children = db.relationship(
        "Category",
        backref=db.backref("parent", remote_side=[id]),
        order_by="Category.position",
        lazy="select",
    )


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(1024), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    categories = db.relationship("Category", secondary=product_categories, lazy="select")
    variants = db.relationship(
        "Variant",
        backref="product",
        order_by="Variant.position",
        lazy="select",
        cascade="all, delete-orphan",
    )


class Variant(db.Model):
    __tablename__ = "variants"

    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    product_id = db.Column(db.String(24), db.ForeignKey("products.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    selling_price = db.Column(db.Float, nullable=False, default=0)
    offer_price = db.Column(db.Float, nullable=True)
    offer_start = db.Column(db.DateTime, nullable=True)  # UTC
    offer_end = db.Column(db.DateTime, nullable=True)  # UTC
    stock = db.Column(db.Integer, nullable=False, default=0)
    size_values = db.Column(db.JSON, nullable=False, default=list)  # e.g. ["S", "M"]
    condition = db.Column(db.String(50), nullable=False, default="new")

    __table_args__ = (
        Index("ix_variants_product_position", "product_id", "position"),
    )
