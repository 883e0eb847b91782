"""Lenient query-string parsing.

URL parameters come from users typing addresses, so malformed values fall
back to defaults instead of producing 400s.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from werkzeug.datastructures import MultiDict


def parse_positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int((raw or "").strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def parse_float(raw: Optional[str], default: float) -> float:
    try:
        value = float((raw or "").strip())
    except ValueError:
        return default
    # NaN/inf never make a usable price bound
    if value != value or value in (float("inf"), float("-inf")):
        return default
    return value


def get_list(args: MultiDict, key: str) -> List[str]:
    """Collect a repeated parameter (?size=S&size=M); blanks and repeats are dropped.

    Values are taken whole: a size such as "42,5" is one value.
    """
    return _dedupe(v.strip() for v in args.getlist(key) if v.strip())


def _dedupe(values: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out
