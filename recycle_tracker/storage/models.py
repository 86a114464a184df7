"""
Data models for storage layer.

Defines the catalog, ledger and roster records shared by every component.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class CatalogEntry:
    """Mapping from a barcode to an item type and its redemption value."""
    barcode: str
    item_type: str
    unit_value: Decimal


@dataclass(frozen=True)
class RecyclingEvent:
    """Immutable record of one recycled item.

    Append-only events that form the ledger of everything a user recycled.
    Once written, these records must never be modified.
    """
    id: str
    item_type: str
    barcode: str
    unit_value: Decimal  # Value at the time of recording
    timestamp: datetime
    owner_user_id: str


@dataclass(frozen=True)
class UserProfile:
    """Leaderboard snapshot of a user's aggregates.

    Derived data: must always equal the aggregation of the user's
    recycling events. Replaced as a whole, never mutated in place.
    """
    id: str
    username: str
    total_recycled: int = 0
    total_value: Decimal = Decimal("0.00")
    environmental_impact: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class AccountCredential:
    """Login credential bound one-to-one to a user profile."""
    username: str
    secret: str
    user_id: str
