"""Ranking comparison statistics used to summarize scenario variants."""

from typing import Dict, Mapping, Optional, Sequence
import numpy as np

from ethicscore.models.scenario import RankedSupplier


def kendall_tau(first: Mapping[str, int], second: Mapping[str, int]) -> float:
    """
    Kendall's tau-a over suppliers ranked in both orderings.

    Tied pairs count as neither concordant nor discordant; fewer than two
    common suppliers gives 0.
    """
    common = [sid for sid in first if sid in second]
    n = len(common)
    if n < 2:
        return 0.0
    a = np.array([first[s] for s in common], dtype=float)
    b = np.array([second[s] for s in common], dtype=float)
    product = np.triu(np.sign(a[:, None] - a[None, :]) * np.sign(b[:, None] - b[None, :]), k=1)
    concordant = int((product > 0).sum())
    discordant = int((product < 0).sum())
    return (concordant - discordant) / (n * (n - 1) / 2)


def rank_shifts(first: Mapping[str, int], second: Mapping[str, int]) -> Dict[str, float]:
    shifts = np.array([abs(first[s] - second[s]) for s in first if s in second], dtype=float)
    if shifts.size == 0:
        return {"mean_rank_shift": 0.0, "max_rank_shift": 0.0}
    return {"mean_rank_shift": float(shifts.mean()), "max_rank_shift": float(shifts.max())}


def top_k_preservation(first: Sequence[str], second: Sequence[str], k: int = 3) -> float:
    """Percent of the first ordering's top-k that stays in the second's top-k."""
    top = list(first[:k])
    if not top:
        return 0.0
    kept = set(second[:k])
    return 100.0 * sum(1 for s in top if s in kept) / len(top)


def mean_absolute_error(first: Mapping[str, float], second: Mapping[str, float]) -> Optional[float]:
    diffs = [abs(first[s] - second[s]) for s in first if s in second]
    if not diffs:
        return None
    return float(np.mean(diffs))


def industry_disparity(rows: Sequence[RankedSupplier]) -> Optional[float]:
    """Largest gap between industry mean final scores."""
    by_industry: Dict[str, list] = {}
    for row in rows:
        by_industry.setdefault(row.supplier.industry, []).append(row.supplier.final_score)
    if len(by_industry) < 2:
        return None
    means = [float(np.mean(v)) for v in by_industry.values()]
    return max(means) - min(means)


def compare_rankings(baseline: Sequence[RankedSupplier], variant: Sequence[RankedSupplier]) -> Dict[str, Optional[float]]:
    base_ranks = {r.supplier.supplier_id: r.rank for r in baseline}
    var_ranks = {r.supplier.supplier_id: r.rank for r in variant}
    stats: Dict[str, Optional[float]] = {"kendall_tau": kendall_tau(base_ranks, var_ranks)}
    stats.update(rank_shifts(base_ranks, var_ranks))
    stats["top3_preservation_pct"] = top_k_preservation(
        [r.supplier.supplier_id for r in baseline], [r.supplier.supplier_id for r in variant], k=3
    )
    stats["final_score_mae"] = mean_absolute_error(
        {r.supplier.supplier_id: r.supplier.final_score for r in baseline},
        {r.supplier.supplier_id: r.supplier.final_score for r in variant},
    )
    return stats
