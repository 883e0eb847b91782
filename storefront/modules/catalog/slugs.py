"""Slug matching for /main-category/<slug> URLs."""

from __future__ import annotations

import re
from typing import Optional, Sequence, Union

from storefront.modules.catalog.domain import Business, Category

_WHITESPACE = re.compile(r"\s+")
# word chars are ASCII-only, same as the links the storefront has always emitted
_NON_WORD = re.compile(r"[^\w\-]+", re.ASCII)
_HYPHEN_RUN = re.compile(r"-{2,}")


def slugify(name: str) -> str:
    slug = _WHITESPACE.sub("-", (name or "").lower())
    slug = _NON_WORD.sub("", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")


def resolve_category(slug: str, categories: Sequence[Category]) -> Optional[Category]:
    """Return the first category whose slugified name equals ``slug``.

    Duplicate names are not rejected; list order decides.
    """
    wanted = slugify(slug)
    if not wanted:
        return None
    for category in categories:
        if slugify(category.name) == wanted:
            return category
    return None


def pick_business(data: Union[Business, Sequence[Business], None]) -> Optional[Business]:
    """The business source may answer with one business or a list of them.

    From a list, prefer the first business that has categories.
    """
    if data is None or isinstance(data, Business):
        return data
    for business in data:
        if business.categories:
            return business
    return data[0] if data else None
