"""Quality badge classification."""

from quality_engine.models.types import QualityBadge

# Ordered from the highest band down; first lower bound <= score wins
_BANDS: tuple[QualityBadge, ...] = (
    QualityBadge.EXCELLENT,
    QualityBadge.GOOD,
    QualityBadge.FAIR,
    QualityBadge.POOR,
)


def classify_badge(score: float) -> QualityBadge:
    """Map an overall score in [0, 100] to its quality badge.

    Bands are closed-open: 24.999 is Critical, 25.0 is Poor, 90.0 is
    Excellent. Scores are compared as floats, never truncated.

    Args:
        score: Overall score, already clamped to [0, 100] by the caller

    Returns:
        QualityBadge
    """
    for badge in _BANDS:
        if score >= badge.lower_bound:
            return badge
    return QualityBadge.CRITICAL
