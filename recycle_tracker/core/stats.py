"""
Per-user statistics aggregation.

Recomputes totals from the ledger on every call; nothing is cached.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from ..storage.models import RecyclingEvent
from ..utils.logger import get_logger
from .impact import DEFAULT_IMPACT_WEIGHT, IMPACT_RULES, ImpactRule, impact_weight
from .ledger import Ledger
from .money import ZERO

logger = get_logger(__name__)


@dataclass(frozen=True)
class UserStats:
    """Aggregates for a single user."""
    total_recycled: int
    total_value: Decimal
    environmental_impact: Decimal

    def __post_init__(self):
        """Validate aggregates are non-negative."""
        if self.total_recycled < 0:
            raise ValueError("total_recycled cannot be negative")
        if self.total_value < 0:
            raise ValueError("total_value cannot be negative")
        if self.environmental_impact < 0:
            raise ValueError("environmental_impact cannot be negative")


class StatsEngine:
    """Computes UserStats from the ledger using ordered impact rules."""

    def __init__(
        self,
        ledger: Ledger,
        rules: Sequence[ImpactRule] = IMPACT_RULES,
        default_weight: Decimal = DEFAULT_IMPACT_WEIGHT
    ):
        self.ledger = ledger
        self.rules = tuple(rules)
        self.default_weight = default_weight

    def compute_stats(self, user_id: str) -> UserStats:
        """Aggregate every ledger event owned by user_id.

        Args:
            user_id: User to aggregate

        Returns:
            UserStats with item count, total value and impact score
        """
        stats = self.aggregate(self.ledger.all_for(user_id))
        logger.debug(
            "Stats for %s: %d items, %s value, %s impact",
            user_id, stats.total_recycled, stats.total_value, stats.environmental_impact
        )
        return stats

    def aggregate(self, events: Sequence[RecyclingEvent]) -> UserStats:
        total_value = ZERO
        impact = ZERO
        for event in events:
            total_value += event.unit_value
            impact += impact_weight(event.item_type, self.rules, self.default_weight)

        return UserStats(
            total_recycled=len(events),
            total_value=total_value,
            environmental_impact=impact,
        )
