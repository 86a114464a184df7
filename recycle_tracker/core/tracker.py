"""
Recycle tracker coordinator.

Composes the catalog, ledger, stats engine, leaderboard and account
directory, and owns the composite operations that must stay consistent
across them.

Record Scan Order (under one lock):
1. Check the owner is registered, then resolve the barcode in the catalog
2. Write the event to the durable store, if one is attached
3. Append the event to the ledger
4. Recompute the owner's stats and refresh the leaderboard snapshot

A failed store write raises before step 3, so memory never holds state the
database does not.
"""

import threading
from datetime import datetime
from typing import List, Optional

from ..config.loader import TrackerConfig, default_config
from ..errors import ItemNotFoundError, UserNotFoundError
from ..storage.models import CatalogEntry, RecyclingEvent, UserProfile
from ..storage.repository import TrackerRepository
from ..utils.logger import get_logger
from .accounts import AccountDirectory
from .catalog import Catalog
from .leaderboard import Leaderboard, RankMetric
from .ledger import Ledger
from .money import AmountLike
from .stats import StatsEngine, UserStats

logger = get_logger(__name__)


class RecycleTracker:
    """Service object tying the tracker components together.

    Reads that go through the tracker take the same lock as record_scan,
    so nobody observes a ledger append without its leaderboard update.
    """

    def __init__(
        self,
        catalog: Catalog,
        ledger: Ledger,
        stats: StatsEngine,
        leaderboard: Leaderboard,
        accounts: AccountDirectory,
        config: Optional[TrackerConfig] = None,
        repository: Optional[TrackerRepository] = None
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.stats = stats
        self.leaderboard = leaderboard
        self.accounts = accounts
        self.config = config or default_config()
        self.repository = repository
        self._lock = threading.RLock()

    @classmethod
    def create(
        cls,
        config: Optional[TrackerConfig] = None,
        repository: Optional[TrackerRepository] = None
    ) -> "RecycleTracker":
        """Build a tracker with fresh components.

        When a repository is given, its schema is created if needed and the
        persisted catalog, accounts and events are loaded. Profiles are then
        recomputed from the ledger.
        """
        config = config or default_config()
        ledger = Ledger()
        leaderboard = Leaderboard()
        tracker = cls(
            catalog=Catalog(),
            ledger=ledger,
            stats=StatsEngine(
                ledger,
                rules=config.stats.impact_rules,
                default_weight=config.stats.default_weight,
            ),
            leaderboard=leaderboard,
            accounts=AccountDirectory(leaderboard),
            config=config,
            repository=repository,
        )
        if repository is not None:
            repository.initialize_schema()
            tracker._load(repository)
        return tracker

    def _load(self, repository: TrackerRepository) -> None:
        with self._lock:
            for entry in repository.fetch_catalog_entries():
                self.catalog.store(entry)
            for credential in repository.fetch_accounts():
                self.accounts.restore(credential)
            events = repository.fetch_recycling_events()
            for event in events:
                self.ledger.restore(event)
            for profile in self.leaderboard.list_users():
                self._refresh(profile.id)

        logger.info(
            "Loaded %d catalog entries, %d accounts, %d events from %s",
            len(self.catalog), len(self.leaderboard), len(events), repository.db_path
        )

    # ------------------------------
    # Catalog
    # ------------------------------

    def scan(self, barcode: str) -> Optional[CatalogEntry]:
        """Resolve a scanned barcode; None means the caller should prompt for details."""
        return self.catalog.lookup(barcode)

    def register_item(self, barcode: str, item_type: str, unit_value: AmountLike) -> CatalogEntry:
        """Persist a catalog entry, then register or overwrite it in memory."""
        with self._lock:
            entry = self.catalog.new_entry(barcode, item_type, unit_value)
            if self.repository is not None:
                self.repository.upsert_catalog_entry(entry)
            return self.catalog.store(entry)

    # ------------------------------
    # Accounts
    # ------------------------------

    def register_user(self, username: str, secret: str) -> str:
        """Register an account; the zeroed profile is on the roster on return.

        The account is stored before it is published, so a failed write
        (another process took the id, locked database) leaves no trace.
        """
        with self._lock:
            credential = self.accounts.new_credential(username, secret)
            if self.repository is not None:
                self.repository.insert_account(credential)
            self.accounts.restore(credential)

        logger.info("Registered %s as %s", username, credential.user_id)
        return credential.user_id

    def login(self, username: str, secret: str) -> Optional[str]:
        return self.accounts.login(username, secret)

    # ------------------------------
    # Recording
    # ------------------------------

    def record_scan(
        self,
        user_id: str,
        barcode: str,
        timestamp: Optional[datetime] = None
    ) -> RecyclingEvent:
        """Record a confirmed scan and refresh the owner's leaderboard snapshot.

        Args:
            user_id: Owner of the new event
            barcode: Barcode that was scanned and confirmed
            timestamp: When the item was recycled (defaults to now)

        Returns:
            The recorded RecyclingEvent

        Raises:
            ItemNotFoundError: If the barcode is not in the catalog
            UserNotFoundError: If user_id is unknown and require_known_user is set
        """
        with self._lock:
            if not self.leaderboard.has_user(user_id):
                if self.config.require_known_user:
                    raise UserNotFoundError(user_id)
                logger.warning("Recording scan for unknown user %s", user_id)

            entry = self.catalog.lookup(barcode)
            if entry is None:
                raise ItemNotFoundError(barcode)

            event = self.ledger.new_event(
                owner_user_id=user_id,
                item_type=entry.item_type,
                barcode=entry.barcode,
                unit_value=entry.unit_value,
                timestamp=timestamp,
            )
            if self.repository is not None:
                self.repository.insert_recycling_event(event)
            self.ledger.restore(event)
            stats = self._refresh(user_id)

        logger.info(
            "Recorded %s (%s) for %s: %d items, $%s total",
            entry.item_type, barcode, user_id, stats.total_recycled, stats.total_value
        )
        return event

    def _refresh(self, user_id: str) -> UserStats:
        stats = self.stats.compute_stats(user_id)
        self.leaderboard.update_snapshot(
            user_id,
            total_recycled=stats.total_recycled,
            total_value=stats.total_value,
            environmental_impact=stats.environmental_impact,
        )
        return stats

    # ------------------------------
    # Reads
    # ------------------------------

    def user_stats(self, user_id: str) -> UserStats:
        with self._lock:
            return self.stats.compute_stats(user_id)

    def recent_items(self, user_id: str, limit: Optional[int] = None) -> List[RecyclingEvent]:
        if limit is None:
            limit = self.config.stats.recent_limit
        with self._lock:
            return self.ledger.recent_for(user_id, limit)

    def leaderboard_ranking(
        self,
        metric: RankMetric = RankMetric.ITEM_COUNT,
        limit: Optional[int] = None
    ) -> List[UserProfile]:
        """Ranked roster; limit defaults to the configured top-N."""
        if limit is None:
            limit = self.config.leaderboard_limit
        with self._lock:
            return self.leaderboard.rank(metric, limit=limit)
