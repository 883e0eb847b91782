from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from storefront.modules.catalog.domain import Category

logger = logging.getLogger(__name__)

MAX_CATEGORY_DEPTH = 32


def descendant_ids(category: Category, max_depth: int = MAX_CATEGORY_DEPTH) -> List[str]:
    """Ids of ``category`` and everything below it, depth-first pre-order.

    The tree comes from the catalog service, so a repeated id (cycle or
    shared node) is visited once and branches deeper than ``max_depth`` are
    cut off.
    """
    ids: List[str] = []
    seen = set()
    # explicit stack keeps deep trees off the interpreter recursion limit
    stack = [(category, 0)]
    while stack:
        node, depth = stack.pop()
        if node.id in seen:
            logger.warning("Category %s reached twice while expanding %s", node.id, category.id)
            continue
        if depth > max_depth:
            logger.warning("Category tree under %s deeper than %d, truncating", category.id, max_depth)
            continue
        seen.add(node.id)
        ids.append(node.id)
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return ids


def find_category(categories: Sequence[Category], category_id: Optional[str]) -> Optional[Category]:
    """Top-level lookup by id (``?category=<id>``)."""
    if not category_id:
        return None
    for category in categories:
        if category.id == category_id:
            return category
    return None
