"""Category peer benchmarking.

Ranks a contract's overall score against the scores of every other
contract in the same category.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from quality_engine.analysis.stats import summarize_distribution
from quality_engine.core.exceptions import DataValidationError
from quality_engine.models.quality import CategoryBenchmark

_FULL_RANK = 100.0


def percentile_rank(score: float, peer_scores: Sequence[float]) -> float:
    """Share (0-100) of peers + this contract scoring at or below ``score``.

    Ties count in the contract's favor: a contract tied with the best
    peer ranks at 100.
    """
    at_or_below = 1 + sum(1 for s in peer_scores if s <= score)
    return at_or_below / (len(peer_scores) + 1) * _FULL_RANK


def benchmark_against_category(
    category: str,
    score: float,
    peer_scores: Sequence[float],
) -> CategoryBenchmark:
    """Compare one overall score to its category's peer distribution.

    With no peers the benchmark degenerates explicitly: every statistic
    equals the score itself, the rank is 100 and the contract counts as
    above average.

    Args:
        category: Category label shared by the peers
        score: This contract's overall score
        peer_scores: Overall scores of the other contracts in the category

    Returns:
        CategoryBenchmark

    Raises:
        DataValidationError: A score outside [0, 100]
    """
    for value in (score, *peer_scores):
        if not 0.0 <= value <= 100.0:
            msg = "Overall scores must be within [0, 100]"
            raise DataValidationError(msg, context={"category": category, "score": value})

    if not peer_scores:
        logger.debug(f"Category '{category}' has no peers, using degenerate benchmark")
        return CategoryBenchmark(
            category=category,
            peer_count=0,
            category_avg_score=score,
            category_p25_score=score,
            category_p75_score=score,
            category_p95_score=score,
            this_contract_score=score,
            percentile_rank=_FULL_RANK,
            above_average=True,
        )

    summary = summarize_distribution(peer_scores)
    rank = percentile_rank(score, peer_scores)
    logger.debug(
        f"Category '{category}': peers={summary.count}, avg={summary.mean:.2f}, "
        f"rank={rank:.1f}"
    )
    return CategoryBenchmark(
        category=category,
        peer_count=summary.count,
        category_avg_score=summary.mean,
        category_p25_score=summary.p25,
        category_p75_score=summary.p75,
        category_p95_score=summary.p95,
        this_contract_score=score,
        percentile_rank=rank,
        above_average=score > summary.mean,
    )
