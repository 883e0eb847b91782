"""Immutable catalog records the storefront pipeline operates on.

Records are built from the data-source JSON shape (see ``source.py``), which
is the same shape the ``/api`` endpoints return. Parsing is lenient: a
product with garbage fields still renders, priced at 0 if need be.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


def as_utc(value: Any) -> Optional[datetime]:
    """Accept datetimes or ISO-8601 strings; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _as_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _as_int(value: Any) -> int:
    number = _as_number(value)
    return int(number) if number is not None else 0


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    children: Tuple["Category", ...] = ()

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            children=tuple(cls.from_record(c) for c in data.get("children") or () if isinstance(c, dict)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "children": [c.to_dict() for c in self.children]}


@dataclass(frozen=True)
class CategoryTag:
    id: str
    name: str


@dataclass(frozen=True)
class Variant:
    selling_price: float = 0.0
    offer_price: Optional[float] = None
    offer_start: Optional[datetime] = None
    offer_end: Optional[datetime] = None
    stock: int = 0
    size_values: Tuple[str, ...] = ()
    condition: str = ""

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Variant":
        return cls(
            selling_price=_as_number(data.get("selling_price")) or 0.0,
            offer_price=_as_number(data.get("offer_price")),
            offer_start=as_utc(data.get("offer_start")),
            offer_end=as_utc(data.get("offer_end")),
            stock=_as_int(data.get("stock")),
            size_values=tuple(str(s) for s in data.get("size_values") or ()),
            condition=str(data.get("condition") or ""),
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category_tags: Tuple[CategoryTag, ...] = ()
    variants: Tuple[Variant, ...] = ()
    image_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Product":
        tags = tuple(
            CategoryTag(id=str(c.get("id") or ""), name=str(c.get("name") or ""))
            for c in data.get("categories") or ()
            if isinstance(c, dict)
        )
        variants = tuple(Variant.from_record(v) for v in data.get("variants") or () if isinstance(v, dict))
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            category_tags=tags,
            variants=variants,
            image_url=data.get("image_url"),
            raw=data,
        )


@dataclass(frozen=True)
class Business:
    id: str
    name: str
    categories: Tuple[Category, ...] = ()

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Business":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            categories=tuple(Category.from_record(c) for c in data.get("categories") or () if isinstance(c, dict)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "categories": [c.to_dict() for c in self.categories]}
