"""Filter, sort and paginate the product snapshot for one render.

The whole snapshot is loaded once per page request and this module
recomputes the visible slice from it; there is no SQL-side filtering.
"""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from storefront.modules.catalog.domain import Product
from storefront.modules.catalog.pricing import DEFAULT_PRICE_BOUNDS, effective_price, resolve_now

PAGE_SIZE = 20


class SortKey(str, Enum):
    NAME = "name"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    NEWEST = "newest"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "SortKey":
        try:
            return cls((raw or "").strip())
        except ValueError:
            return cls.NEWEST


@dataclass(frozen=True)
class ViewParams:
    search: str = ""
    selected_categories: Tuple[str, ...] = ()
    selected_sizes: Tuple[str, ...] = ()
    price_range: Tuple[float, float] = DEFAULT_PRICE_BOUNDS
    sort: SortKey = SortKey.NEWEST
    page: int = 1


@dataclass(frozen=True)
class PipelineResult:
    filtered: List[Product] = field(default_factory=list)
    paginated: List[Product] = field(default_factory=list)
    total_pages: int = 0

    @property
    def show_pagination(self) -> bool:
        return self.total_pages > 1


def search_text(product: Product) -> str:
    parts = [product.name.lower()]
    parts.extend(tag.name.lower() for tag in product.category_tags)
    parts.extend(v.condition.lower() for v in product.variants)
    return " ".join(parts)


def matches(product: Product, params: ViewParams, now: datetime) -> bool:
    lo, hi = params.price_range
    price = effective_price(product, now)
    if price < lo or price > hi:
        return False

    query = params.search.strip().lower()
    if query and query not in search_text(product):
        return False

    if params.selected_categories:
        selected = set(params.selected_categories)
        if not any(tag.id in selected for tag in product.category_tags):
            return False

    if params.selected_sizes:
        selected = set(params.selected_sizes)
        if not any(size in selected for v in product.variants for size in v.size_values):
            return False

    return True


def name_collation_key(name: str) -> Tuple[str, str]:
    """Accent- and case-insensitive order; accented letters sort beside their base letter.

    Ties on the folded form fall back to the casefolded original, so "cote"
    sorts before "côte".
    """
    folded = name.casefold()
    stripped = "".join(c for c in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(c))
    return stripped, folded


def sort_products(products: Sequence[Product], key: SortKey, now: datetime) -> List[Product]:
    # sorted() is stable, reverse=True included
    if key is SortKey.NAME:
        return sorted(products, key=lambda p: name_collation_key(p.name))
    if key is SortKey.PRICE_LOW:
        return sorted(products, key=lambda p: effective_price(p, now))
    if key is SortKey.PRICE_HIGH:
        return sorted(products, key=lambda p: effective_price(p, now), reverse=True)
    # ids are time-ordered, so descending id is newest first
    return sorted(products, key=lambda p: p.id, reverse=True)


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count else 0


def paginate(items: Sequence[Product], page: int, page_size: int = PAGE_SIZE) -> List[Product]:
    """Slice one page; pages past the end are empty, callers clamp."""
    start = (max(page, 1) - 1) * page_size
    return list(items[start:start + page_size])


def run_pipeline(
    products: Sequence[Product],
    params: ViewParams,
    now: Optional[datetime] = None,
    page_size: int = PAGE_SIZE,
) -> PipelineResult:
    now = resolve_now(now)
    filtered = sort_products([p for p in products if matches(p, params, now)], params.sort, now)
    return PipelineResult(
        filtered=filtered,
        paginated=paginate(filtered, params.page, page_size),
        total_pages=total_pages(len(filtered), page_size),
    )
