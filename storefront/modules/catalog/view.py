from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from werkzeug.datastructures import MultiDict

from storefront.modules.catalog.domain import Business, Category, Product
from storefront.modules.catalog.pipeline import PAGE_SIZE, PipelineResult, run_pipeline
from storefront.modules.catalog.pricing import price_bounds, utcnow
from storefront.modules.catalog.slugs import pick_business, resolve_category
from storefront.modules.catalog.source import load_businesses, load_products
from storefront.modules.catalog.state import ViewState
from storefront.modules.catalog.tree import descendant_ids, find_category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogPage:
    """Everything a category or shop-all page renders."""

    business: Optional[Business]
    main_category: Optional[Category]
    state: ViewState
    result: PipelineResult
    bounds: Tuple[float, float]
    sizes: List[str]
    total_products: int

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self.business.categories if self.business else ()


def available_sizes(products: List[Product]) -> List[str]:
    return sorted({s for p in products for v in p.variants for s in v.size_values})


def build_catalog_page(
    args: MultiDict,
    slug: Optional[str] = None,
    page_size: int = PAGE_SIZE,
    now: Optional[datetime] = None,
) -> CatalogPage:
    """Load the snapshot and run the grid for one request.

    With ``slug`` the selection is seeded from the matching top-level
    category (none when nothing matches); without it from ``?category=<id>``.
    Raises ``CatalogUnavailable`` when the snapshot cannot be loaded.
    """
    now = now or utcnow()
    business = pick_business(load_businesses())
    products = load_products()
    categories = business.categories if business else ()

    if slug is not None:
        main_category = resolve_category(slug, categories)
        logger.info("Category slug %r resolved to %s", slug, main_category.id if main_category else None)
    else:
        main_category = find_category(categories, args.get("category"))
    seeded = descendant_ids(main_category) if main_category else []

    bounds = price_bounds(products, now)
    state = ViewState.from_query(args, bounds, seeded)
    result = run_pipeline(products, state.params, now, page_size)

    # a page past the end (e.g. a stale link after the catalog shrank) shows the last page
    if result.total_pages and state.params.page > result.total_pages:
        state = state.set_page(result.total_pages)
        result = run_pipeline(products, state.params, now, page_size)

    logger.info(
        "Catalog view: %d products, %d matching, page %d/%d",
        len(products), len(result.filtered), state.params.page, result.total_pages,
    )
    return CatalogPage(
        business=business,
        main_category=main_category,
        state=state,
        result=result,
        bounds=bounds,
        sizes=available_sizes(products),
        total_products=len(products),
    )
