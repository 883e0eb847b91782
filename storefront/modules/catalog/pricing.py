"""Effective price of a product.

Filtering, sorting and the price-range defaults all price a product through
``effective_price``; pass the same ``now`` to every call in one render.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from storefront.modules.catalog.domain import Product, Variant, as_utc

DEFAULT_PRICE_BOUNDS: Tuple[float, float] = (0.0, 10000.0)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """The render instant as an aware UTC datetime; naive values are taken as UTC."""
    return as_utc(now) if now is not None else utcnow()


def representative_variant(product: Product) -> Optional[Variant]:
    """First variant in stock, else the first variant."""
    for variant in product.variants:
        if variant.stock > 0:
            return variant
    return product.variants[0] if product.variants else None


def offer_active(variant: Variant, now: datetime) -> bool:
    # a zero offer price means no offer
    if variant.offer_price is None or variant.offer_price <= 0 or variant.offer_price >= variant.selling_price:
        return False
    # no end date means the offer never went live
    if variant.offer_end is None:
        return False
    start = variant.offer_start or _EPOCH
    return start <= now <= variant.offer_end


def effective_price(product: Product, now: Optional[datetime] = None) -> float:
    variant = representative_variant(product)
    if variant is None:
        return 0.0
    if offer_active(variant, resolve_now(now)):
        return variant.offer_price
    return variant.selling_price


def price_bounds(products: Sequence[Product], now: Optional[datetime] = None) -> Tuple[float, float]:
    now = resolve_now(now)
    prices = [p for p in (effective_price(product, now) for product in products) if not math.isnan(p)]
    if not prices:
        return DEFAULT_PRICE_BOUNDS
    return min(prices), max(prices)
