"""Server-rendered storefront pages.

The product grid is rendered from the full catalog snapshot on every
request; every filter, sort and pagination control is a plain link whose
query string comes from the ``ViewState`` the control would produce.
"""

import logging
from typing import Any, Dict, List, Tuple
from urllib.parse import urlencode

from flask import Blueprint, current_app, redirect, render_template, request

from storefront.app.common.errors import CatalogUnavailable
from storefront.app.common.query import parse_positive_int
from storefront.modules.catalog.domain import Category
from storefront.modules.catalog.pipeline import SortKey
from storefront.modules.catalog.pricing import effective_price, utcnow
from storefront.modules.catalog.state import ViewState
from storefront.modules.catalog.tree import descendant_ids
from storefront.modules.catalog.view import CatalogPage, build_catalog_page

logger = logging.getLogger(__name__)

ui_bp = Blueprint("ui", __name__)

ERROR_MESSAGE = "Error loading category. Please try again."

SORT_LABELS = {
    SortKey.NEWEST: "Newest",
    SortKey.NAME: "Name",
    SortKey.PRICE_LOW: "Price: low to high",
    SortKey.PRICE_HIGH: "Price: high to low",
}


def _href(path: str, query: Dict[str, Any]) -> str:
    return f"{path}?{urlencode(query, doseq=True)}" if query else path


def _pairs(query: Dict[str, Any]) -> List[Tuple[str, Any]]:
    """Flatten list values into one (key, value) pair each, for hidden form inputs."""
    return [(k, item) for k, v in query.items() for item in (v if isinstance(v, list) else [v])]


def toggle_category(state: ViewState, category: Category) -> ViewState:
    """Select a category together with its sub-categories, or drop them all."""
    ids = descendant_ids(category)

    def apply(current):
        if category.id in current:
            return tuple(i for i in current if i not in ids)
        return current + tuple(i for i in ids if i not in current)

    return state.update("selected_categories", apply)


def _links(page: CatalogPage, path: str) -> Dict[str, Any]:
    state = page.state
    cleared, nav = state.clear_all()
    pages = range(1, page.result.total_pages + 1)
    return {
        "sort": {key: _href(path, state.set("sort", key).to_query()) for key in SortKey},
        "sizes": {s: _href(path, state.toggle("selected_sizes", s).to_query()) for s in page.sizes},
        "categories": {c.id: _href(path, toggle_category(state, c).to_query()) for c in page.categories},
        "pages": {n: _href(path, q) for n, q in state.page_links(pages).items()},
        "clear": _href(nav.path, cleared.to_query()),
    }


def _render_catalog(page: CatalogPage, title: str):
    now = utcnow()
    return render_template(
        "pages/catalog.html",
        title=title,
        page=page,
        params=page.state.params,
        links=_links(page, request.path),
        sort_labels=SORT_LABELS,
        prices={p.id: effective_price(p, now) for p in page.result.paginated},
        form_fields=_pairs(page.state.to_query(full=True)),
    )


def _render_error():
    return render_template("pages/error.html", message=ERROR_MESSAGE), 503


@ui_bp.get("/")
def home():
    return redirect("/products")


@ui_bp.get("/products")
def shop_all():
    try:
        page = build_catalog_page(request.args, page_size=current_app.config["CATALOG_PAGE_SIZE"])
    except CatalogUnavailable:
        logger.exception("Shop page failed to load")
        return _render_error()
    return _render_catalog(page, "All products")


@ui_bp.get("/main-category/<slug>")
def main_category(slug: str):
    page_no = parse_positive_int(request.args.get("page"), current_app.config["DEFAULT_PAGE"])
    limit = parse_positive_int(request.args.get("limit"), current_app.config["DEFAULT_LIMIT"])
    logger.info("Main category %r page=%d limit=%d", slug, page_no, limit)

    try:
        page = build_catalog_page(request.args, slug=slug, page_size=current_app.config["CATALOG_PAGE_SIZE"])
    except CatalogUnavailable:
        logger.exception("Category page failed to load")
        return _render_error()

    intent = page.state.navigation()
    if intent is not None and intent.path != request.path:
        return redirect(_href(intent.path, page.state.to_query(full=True)))

    title = page.main_category.name if page.main_category else "All products"
    return _render_catalog(page, title)
