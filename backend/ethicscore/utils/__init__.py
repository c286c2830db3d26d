from ethicscore.utils.helpers import (
    clamp, safe_divide, mean_or_none, percent_label, slugify, paginate_results,
)

__all__ = [
    "clamp", "safe_divide", "mean_or_none", "percent_label", "slugify", "paginate_results",
]
