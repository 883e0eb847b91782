from __future__ import annotations

from flask import Blueprint, current_app, request

from storefront.app.common.errors import CatalogUnavailable, abort_json
from storefront.app.common.query import parse_positive_int
from storefront.modules.catalog.slugs import pick_business, resolve_category, slugify
from storefront.modules.catalog.source import fetch_product_records, load_businesses
from storefront.modules.catalog.tree import descendant_ids
from storefront.modules.catalog.view import build_catalog_page

bp = Blueprint("catalog", __name__)


@bp.get("/business")
def get_business():
    """GET /api/business - Business profile with its category tree."""
    try:
        business = pick_business(load_businesses())
    except CatalogUnavailable:
        abort_json(503, "catalog_unavailable", "Business data is unavailable")
    if business is None:
        abort_json(404, "not_found", "No business configured")
    return business.to_dict(), 200


@bp.get("/products")
def list_products():
    """GET /api/products - Raw product listing.

    Query params:
      - page (default 1), limit (default DEFAULT_LIMIT, capped at MAX_LIMIT)
    """
    page = parse_positive_int(request.args.get("page"), current_app.config["DEFAULT_PAGE"])
    limit = parse_positive_int(request.args.get("limit"), current_app.config["DEFAULT_LIMIT"])
    limit = min(limit, current_app.config["MAX_LIMIT"])

    try:
        items, total = fetch_product_records(page, limit)
    except CatalogUnavailable:
        abort_json(503, "catalog_unavailable", "Product data is unavailable")

    return {
        "items": items,
        "pagination": {"page": page, "limit": limit, "count": len(items), "total": total},
    }, 200


@bp.get("/products/view")
def product_view():
    """GET /api/products/view - The product grid for the given view params.

    Query params: q, cat, size, min_price, max_price, sort, page, category
    """
    try:
        page = build_catalog_page(request.args, page_size=current_app.config["CATALOG_PAGE_SIZE"])
    except CatalogUnavailable:
        abort_json(503, "catalog_unavailable", "Catalog is unavailable")

    params = page.state.params
    return {
        "items": [p.raw for p in page.result.paginated],
        "filtered_count": len(page.result.filtered),
        "total_pages": page.result.total_pages,
        "page": params.page,
        "sort": params.sort.value,
        "price_bounds": list(page.bounds),
    }, 200


@bp.get("/main-category/<slug>")
def main_category(slug: str):
    """GET /api/main-category/<slug> - Resolve a category slug."""
    try:
        business = pick_business(load_businesses())
    except CatalogUnavailable:
        abort_json(503, "catalog_unavailable", "Business data is unavailable")

    category = resolve_category(slug, business.categories if business else ())
    return {
        "slug": slugify(slug),
        "category": category.to_dict() if category else None,
        "descendant_ids": descendant_ids(category) if category else [],
    }, 200
