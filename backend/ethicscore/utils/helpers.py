"""Shared helper utilities."""

import re
from typing import Iterable, Optional



def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def safe_divide(numerator: float, denominator: Optional[float]) -> Optional[float]:
    """Divide, returning None when the denominator is missing or not positive."""
    if denominator is None or denominator <= 0:
        return None
    return numerator / denominator


def mean_or_none(values: Iterable[float]) -> Optional[float]:
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def percent_label(fraction: float) -> str:
    """0.05 → '5%', -0.2 → '-20%'."""
    return f"{round(fraction * 100, 6):g}%"


def slugify(label: str) -> str:
    """Filename-safe slug: '+10% weights' → 'plus10pct_weights'."""
    slug = label.strip().lower()
    slug = slug.replace("+", "plus").replace("%", "pct")
    slug = re.sub(r"-(?=\d)", "minus", slug)
    slug = re.sub(r"(?<=\d)\.(?=\d)", "p", slug)
    slug = re.sub(r"[^a-z0-9]+", "_", slug)
    return slug.strip("_") or "table"


def paginate_results(items: list, page: int = 1, page_size: int = 50) -> dict:
    """Apply pagination to a list of items."""
    total = len(items)
    start = (page - 1) * page_size
    end = start + page_size
    return {
        "items": items[start:end],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": (total + page_size - 1) // page_size,
    }
