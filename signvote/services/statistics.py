import math

from ..db.repository import SignatureRepository
from ..schemas.signatures import SignatureStats


def compute_progress(total: int, target: int) -> float:
    """Percentage of target reached, rounded half-up to one decimal, capped at 100"""
    if target <= 0:
        raise ValueError("target must be positive")
    percent = math.floor(total / target * 100 * 10 + 0.5) / 10
    return min(percent, 100.0)


class StatisticsAggregator:
    """Count-based progress toward the signature target"""

    def __init__(self, repository: SignatureRepository, target: int):
        self.repository = repository
        self.target = target

    def stats(self) -> SignatureStats:
        total = self.repository.count()
        return SignatureStats(
            total=total,
            target=self.target,
            progress=compute_progress(total, self.target),
        )
