"""
Leaderboard roster and ranking.

Holds the latest aggregate snapshot per user and ranks users by a metric.
"""

import threading
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from ..storage.models import UserProfile
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RankMetric(Enum):
    """Metrics a leaderboard can be ranked by."""
    ITEM_COUNT = "items"
    TOTAL_VALUE = "value"
    ENVIRONMENTAL_IMPACT = "impact"


_METRIC_FIELDS = {
    RankMetric.ITEM_COUNT: "total_recycled",
    RankMetric.TOTAL_VALUE: "total_value",
    RankMetric.ENVIRONMENTAL_IMPACT: "environmental_impact",
}


class Leaderboard:
    """Roster of user profiles in registration order.

    Profiles are frozen and swapped whole on update, so readers always see
    either the old or the new snapshot, never a mix.
    """

    def __init__(self):
        self._profiles: Dict[str, UserProfile] = {}
        self._usernames = set()
        self._lock = threading.RLock()

    def list_users(self) -> List[UserProfile]:
        """Snapshot copy of the roster; does not update live."""
        with self._lock:
            return list(self._profiles.values())

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            return self._profiles.get(user_id)

    def has_user(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._profiles

    def add_user(self, user_id: str, username: str) -> bool:
        """Add a zeroed profile to the end of the roster.

        Idempotent by id: an existing id is left untouched.

        Returns:
            True if the profile was created, False if the id or the
            username is already on the roster
        """
        with self._lock:
            if user_id in self._profiles:
                return False
            if username in self._usernames:
                logger.warning("Username %s already on leaderboard; not adding %s", username, user_id)
                return False
            self._profiles[user_id] = UserProfile(id=user_id, username=username)
            self._usernames.add(username)

        logger.info("Added %s (%s) to leaderboard", username, user_id)
        return True

    def update_snapshot(
        self,
        user_id: str,
        total_recycled: int,
        total_value: Decimal,
        environmental_impact: Decimal
    ) -> bool:
        """Overwrite the aggregate fields for user_id.

        Returns:
            True if updated, False if user_id is not on the roster
        """
        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                logger.warning("Snapshot update for unknown user %s ignored", user_id)
                return False
            self._profiles[user_id] = replace(
                profile,
                total_recycled=total_recycled,
                total_value=total_value,
                environmental_impact=environmental_impact,
            )
        return True

    def rank(self, metric: RankMetric, limit: Optional[int] = None) -> List[UserProfile]:
        """Rank users by metric, highest first.

        The sort is stable, so tied users keep their roster order.

        Args:
            metric: Metric to rank by
            limit: Optional number of top users to return

        Returns:
            Ordered list of user profiles
        """
        field_name = _METRIC_FIELDS[RankMetric(metric)]
        ranked = sorted(
            self.list_users(),
            key=lambda profile: getattr(profile, field_name),
            reverse=True,
        )
        if limit is not None:
            ranked = ranked[:max(limit, 0)]
        return ranked

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)
