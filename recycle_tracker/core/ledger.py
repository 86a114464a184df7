"""
Append-only recycling ledger.

Source of truth for every derived statistic. Events are immutable and are
never updated or removed once recorded.
"""

import threading
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..errors import InvalidInputError
from ..storage.models import RecyclingEvent
from ..utils.logger import get_logger
from .money import AmountLike, to_amount

logger = get_logger(__name__)


class Ledger:
    """In-memory ledger of recycling events.

    The ledger does not check that owner_user_id belongs to a known user;
    referential integrity is the coordinator's job (see RecycleTracker).
    """

    def __init__(self):
        # (insertion sequence, event) per owner, in insertion order
        self._by_owner: Dict[str, List[Tuple[int, RecyclingEvent]]] = {}
        self._by_id: Dict[str, RecyclingEvent] = {}
        self._sequence = 0
        self._lock = threading.RLock()

    def append(
        self,
        owner_user_id: str,
        item_type: str,
        barcode: str,
        unit_value: AmountLike,
        timestamp: Optional[datetime] = None
    ) -> str:
        """Record a new recycling event.

        Args:
            owner_user_id: User the event belongs to
            item_type: Item type at time of recording
            barcode: Scanned barcode
            unit_value: Value at time of recording, must be >= 0
            timestamp: When the item was recycled (defaults to now)

        Returns:
            The generated event id

        Raises:
            InvalidInputError: If unit_value is malformed or negative
        """
        event = self.new_event(owner_user_id, item_type, barcode, unit_value, timestamp)
        self._store(event)
        logger.debug("Ledger append %s for %s (%s)", event.id, owner_user_id, item_type)
        return event.id

    @staticmethod
    def new_event(
        owner_user_id: str,
        item_type: str,
        barcode: str,
        unit_value: AmountLike,
        timestamp: Optional[datetime] = None
    ) -> RecyclingEvent:
        """Build an event with a fresh id without recording it.

        Timezone-aware timestamps are converted to naive local time so every
        stored timestamp compares with the naive datetime.now() default.
        """
        if timestamp is None:
            timestamp = datetime.now()
        elif timestamp.utcoffset() is not None:
            timestamp = timestamp.astimezone().replace(tzinfo=None)

        return RecyclingEvent(
            id=str(uuid.uuid4()),
            item_type=item_type,
            barcode=barcode,
            unit_value=to_amount(unit_value),
            timestamp=timestamp,
            owner_user_id=owner_user_id,
        )

    def restore(self, event: RecyclingEvent) -> None:
        """Re-insert a persisted event, keeping its original id.

        Raises:
            InvalidInputError: If an event with the same id is already recorded
        """
        self._store(event)

    def _store(self, event: RecyclingEvent) -> None:
        with self._lock:
            if event.id in self._by_id:
                raise InvalidInputError(f"Duplicate event id: {event.id}")
            self._sequence += 1
            self._by_owner.setdefault(event.owner_user_id, []).append((self._sequence, event))
            self._by_id[event.id] = event

    def get(self, event_id: str) -> Optional[RecyclingEvent]:
        with self._lock:
            return self._by_id.get(event_id)

    def recent_for(self, user_id: str, limit: int) -> List[RecyclingEvent]:
        """Return up to limit events for user_id, most recent first.

        Ties on timestamp are broken by insertion order, later insertion
        first. A limit <= 0 yields an empty list.
        """
        if limit <= 0:
            return []
        with self._lock:
            entries = list(self._by_owner.get(user_id, ()))

        entries.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [event for _, event in entries[:limit]]

    def all_for(self, user_id: str) -> List[RecyclingEvent]:
        """Return every event for user_id (no ordering guarantee)."""
        with self._lock:
            return [event for _, event in self._by_owner.get(user_id, ())]

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
