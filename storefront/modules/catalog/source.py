"""Catalog data source.

Reads the business/category tree and the product listing out of the
database and serializes them to the record shape the rest of the catalog
(and the JSON API) consumes. Each call returns a complete snapshot.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from storefront.app.common.errors import CatalogUnavailable
from storefront.app.models import Business as BusinessRow
from storefront.app.models import Category as CategoryRow
from storefront.app.models import Product as ProductRow
from storefront.modules.catalog.domain import Business, Product
from storefront.modules.catalog.tree import MAX_CATEGORY_DEPTH

logger = logging.getLogger(__name__)


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def category_record(row: CategoryRow, _depth: int = 0, _seen: Optional[set] = None) -> Dict[str, Any]:
    seen = _seen if _seen is not None else set()
    seen.add(row.id)
    children = []
    if _depth < MAX_CATEGORY_DEPTH:
        children = [
            category_record(child, _depth + 1, seen)
            for child in row.children
            if child.id not in seen
        ]
    return {"id": row.id, "name": row.name, "children": children}


def business_record(row: BusinessRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "categories": [category_record(c) for c in row.categories],
    }


def product_record(row: ProductRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "image_url": row.image_url,
        "categories": [{"id": c.id, "name": c.name} for c in row.categories],
        "variants": [
            {
                "selling_price": v.selling_price,
                "offer_price": v.offer_price,
                "offer_start": _iso(v.offer_start),
                "offer_end": _iso(v.offer_end),
                "stock": v.stock,
                "size_values": list(v.size_values or []),
                "condition": v.condition,
            }
            for v in row.variants
        ],
    }


def fetch_business_records() -> List[Dict[str, Any]]:
    try:
        rows = BusinessRow.query.order_by(BusinessRow.created_at.asc(), BusinessRow.id.asc()).all()
        return [business_record(r) for r in rows]
    except SQLAlchemyError as exc:
        logger.exception("Loading businesses failed")
        raise CatalogUnavailable("business data unavailable") from exc


def fetch_product_records(page: int = 1, limit: Optional[int] = None) -> Tuple[List[Dict[str, Any]], int]:
    """One page of active products (or all of them when ``limit`` is None) plus the total count."""
    try:
        q = ProductRow.query.filter_by(is_active=True).order_by(ProductRow.id.desc())
        total = q.count()
        if limit is not None:
            q = q.offset((page - 1) * limit).limit(limit)
        return [product_record(r) for r in q.all()], total
    except SQLAlchemyError as exc:
        logger.exception("Loading products failed")
        raise CatalogUnavailable("product data unavailable") from exc


def load_businesses() -> List[Business]:
    return [Business.from_record(r) for r in fetch_business_records()]


def load_products() -> List[Product]:
    records, _ = fetch_product_records()
    return [Product.from_record(r) for r in records]
