"""
Item catalog keyed by barcode.

Resolves scanned barcodes to an item type and a unit redemption value.
"""

import threading
from typing import Dict, List, Optional

from ..errors import InvalidInputError
from ..storage.models import CatalogEntry
from ..utils.logger import get_logger
from .money import AmountLike, to_amount

logger = get_logger(__name__)


class Catalog:
    """In-memory barcode catalog.

    Registering an existing barcode overwrites it (last write wins).
    Negative values are rejected with InvalidInputError, never clamped.
    """

    def __init__(self):
        self._entries: Dict[str, CatalogEntry] = {}
        self._lock = threading.RLock()

    def lookup(self, barcode: str) -> Optional[CatalogEntry]:
        """Return the entry for barcode, or None if it is unknown."""
        with self._lock:
            entry = self._entries.get(barcode)
        logger.debug("Catalog lookup %s -> %s", barcode, entry.item_type if entry else "unknown")
        return entry

    def register(self, barcode: str, item_type: str, unit_value: AmountLike) -> CatalogEntry:
        """Insert or overwrite the mapping for barcode.

        Args:
            barcode: Barcode string (non-empty)
            item_type: Item type label (non-empty)
            unit_value: Redemption value, must be >= 0

        Returns:
            The stored CatalogEntry

        Raises:
            InvalidInputError: If any field is empty, malformed or negative
        """
        return self.store(self.new_entry(barcode, item_type, unit_value))

    @staticmethod
    def new_entry(barcode: str, item_type: str, unit_value: AmountLike) -> CatalogEntry:
        """Validate and build an entry without storing it."""
        if not barcode or not barcode.strip():
            raise InvalidInputError("barcode is required and cannot be empty")
        if not item_type or not item_type.strip():
            raise InvalidInputError("item_type is required and cannot be empty")

        return CatalogEntry(
            barcode=barcode,
            item_type=item_type.strip(),
            unit_value=to_amount(unit_value),
        )

    def store(self, entry: CatalogEntry) -> CatalogEntry:
        """Insert or overwrite an already validated entry."""
        with self._lock:
            previous = self._entries.get(entry.barcode)
            self._entries[entry.barcode] = entry

        if previous is not None and previous != entry:
            logger.info(
                "Catalog entry %s overwritten: %s -> %s",
                entry.barcode, previous.item_type, entry.item_type
            )
        else:
            logger.debug("Catalog entry %s registered as %s", entry.barcode, entry.item_type)
        return entry

    def entries(self) -> List[CatalogEntry]:
        with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
