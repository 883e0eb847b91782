"""View parameters of the product grid and the rules for changing them.

Every change goes through ``ViewState._reduce`` so the "back to page 1 when
the result set changes" rule lives in exactly one place. States are
immutable; each mutator returns the next state, which the pages render as
links (``to_query``).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

from werkzeug.datastructures import MultiDict

from storefront.app.common.query import get_list, parse_float, parse_positive_int
from storefront.modules.catalog.pipeline import SortKey, ViewParams
from storefront.modules.catalog.pricing import DEFAULT_PRICE_BOUNDS

SHOP_ALL_PATH = "/products"

# changing any of these resets the page
RESET_FIELDS = frozenset({"search", "selected_categories", "selected_sizes", "price_range", "sort"})


@dataclass(frozen=True)
class Navigate:
    """Request for the page to send the browser elsewhere."""

    path: str


def _normalize(field_name: str, value: Any) -> Any:
    if field_name in ("selected_categories", "selected_sizes"):
        return tuple(dict.fromkeys(str(v) for v in value))
    if field_name == "price_range":
        lo, hi = value
        return (float(lo), float(hi))
    if field_name == "sort":
        return value if isinstance(value, SortKey) else SortKey.parse(value)
    if field_name == "search":
        return str(value or "")
    return value


@dataclass(frozen=True)
class ViewState:
    params: ViewParams
    initial: ViewParams
    bounds: Tuple[float, float] = DEFAULT_PRICE_BOUNDS

    @classmethod
    def seed(
        cls,
        bounds: Tuple[float, float] = DEFAULT_PRICE_BOUNDS,
        selected_categories: Sequence[str] = (),
    ) -> "ViewState":
        initial = ViewParams(
            selected_categories=tuple(dict.fromkeys(selected_categories)),
            price_range=(float(bounds[0]), float(bounds[1])),
        )
        return cls(params=initial, initial=initial, bounds=initial.price_range)

    @classmethod
    def from_query(
        cls,
        args: MultiDict,
        bounds: Tuple[float, float] = DEFAULT_PRICE_BOUNDS,
        selected_categories: Sequence[str] = (),
    ) -> "ViewState":
        """Rebuild the state a previous render encoded into its links."""
        state = cls.seed(bounds, selected_categories)
        lo = parse_float(args.get("min_price"), state.bounds[0])
        hi = parse_float(args.get("max_price"), state.bounds[1])
        params = ViewParams(
            search=args.get("q", ""),
            selected_categories=tuple(get_list(args, "cat")) if "cat" in args else state.initial.selected_categories,
            selected_sizes=tuple(get_list(args, "size")),
            price_range=(min(lo, hi), max(lo, hi)),
            sort=SortKey.parse(args.get("sort")),
            page=parse_positive_int(args.get("page"), 1),
        )
        return replace(state, params=params)

    def _reduce(self, field_name: str, value: Any) -> "ViewState":
        if field_name not in RESET_FIELDS:
            raise ValueError(f"unknown view parameter: {field_name}")
        value = _normalize(field_name, value)
        if getattr(self.params, field_name) == value:
            return self
        return replace(self, params=replace(self.params, **{field_name: value, "page": 1}))

    def set(self, field_name: str, value: Any) -> "ViewState":
        return self._reduce(field_name, value)

    def update(self, field_name: str, fn: Callable[[Any], Any]) -> "ViewState":
        if field_name not in RESET_FIELDS:
            raise ValueError(f"unknown view parameter: {field_name}")
        return self._reduce(field_name, fn(getattr(self.params, field_name)))

    def set_page(self, page: int) -> "ViewState":
        return replace(self, params=replace(self.params, page=max(int(page), 1)))

    def toggle(self, field_name: str, value: str) -> "ViewState":
        """Add or remove one value of a multi-select filter."""
        return self.update(
            field_name,
            lambda current: tuple(v for v in current if v != value) if value in current else current + (value,),
        )

    def clear_all(self) -> Tuple["ViewState", Navigate]:
        cleared = replace(
            self,
            params=ViewParams(price_range=self.bounds, sort=self.params.sort, page=1),
            initial=ViewParams(price_range=self.bounds, sort=self.params.sort),
        )
        return cleared, Navigate(SHOP_ALL_PATH)

    def filters_changed(self) -> bool:
        p, i = self.params, self.initial
        return (
            len(p.selected_categories) != len(i.selected_categories)
            or bool(p.selected_sizes)
            or bool(p.search)
            or p.price_range != self.bounds
        )

    def navigation(self) -> Optional[Navigate]:
        """Once the shopper filters beyond the seeded view, the shop-all page owns it."""
        if self.filters_changed():
            return Navigate(SHOP_ALL_PATH)
        return None

    def to_query(self, full: bool = False) -> Dict[str, Any]:
        """Query-string form of ``params``; values equal to the defaults are left out.

        Multi-select filters are lists, one query parameter per value
        (``urlencode(..., doseq=True)``), since sizes may contain commas.

        ``full`` always writes the category selection, for links that leave
        the page the selection was seeded on.
        """
        p = self.params
        query: Dict[str, Any] = {}
        if p.search:
            query["q"] = p.search
        if p.selected_categories != self.initial.selected_categories or (full and p.selected_categories):
            # an empty entry keeps "nothing selected" distinct from "use the seed"
            query["cat"] = list(p.selected_categories) or [""]
        if p.selected_sizes:
            query["size"] = list(p.selected_sizes)
        if p.price_range[0] != self.bounds[0]:
            query["min_price"] = _fmt(p.price_range[0])
        if p.price_range[1] != self.bounds[1]:
            query["max_price"] = _fmt(p.price_range[1])
        if p.sort is not SortKey.NEWEST:
            query["sort"] = p.sort.value
        if p.page != 1:
            query["page"] = p.page
        return query

    def page_links(self, pages: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        return {n: self.set_page(n).to_query() for n in pages}


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
