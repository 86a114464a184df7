"""
Repository pattern for data access.

Persists catalog entries, accounts and the append-only recycling ledger.
User profiles are never stored: they are recomputed from the ledger on load.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from .db import DEFAULT_DB_PATH, get_connection
from .models import AccountCredential, CatalogEntry, RecyclingEvent

_EVENT_COLUMNS = "id, item_type, barcode, unit_value, timestamp, owner_user_id"


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the tracker tables if they don't exist.

    The recycling_event table is an append-only ledger. No UPDATE or
    DELETE operations should ever be performed on it.

    Args:
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS catalog_entry (
                barcode TEXT PRIMARY KEY,
                item_type TEXT NOT NULL,
                unit_value TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS account (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL UNIQUE,
                username TEXT NOT NULL UNIQUE,
                secret TEXT NOT NULL
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS recycling_event (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                item_type TEXT NOT NULL,
                barcode TEXT NOT NULL,
                unit_value TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                owner_user_id TEXT NOT NULL
            )
        """)
        conn.commit()
    finally:
        conn.close()


def _event_params(event: RecyclingEvent) -> tuple:
    return (
        event.id,
        event.item_type,
        event.barcode,
        str(event.unit_value),
        event.timestamp.isoformat(),
        event.owner_user_id,
    )


def _row_to_event(row) -> RecyclingEvent:
    return RecyclingEvent(
        id=row[0],
        item_type=row[1],
        barcode=row[2],
        unit_value=Decimal(row[3]),
        timestamp=datetime.fromisoformat(row[4]),
        owner_user_id=row[5],
    )


class TrackerRepository:
    """Repository for the durable tracker state.

    Each call opens its own connection and commits before returning, so the
    repository can be shared by the CLI and the in-process tracker alike.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def initialize_schema(self) -> None:
        initialize_schema(self.db_path)

    def upsert_catalog_entry(self, entry: CatalogEntry) -> None:
        """Insert or overwrite a catalog entry (last write wins)."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                INSERT INTO catalog_entry (barcode, item_type, unit_value)
                VALUES (?, ?, ?)
                ON CONFLICT(barcode) DO UPDATE SET
                    item_type = excluded.item_type,
                    unit_value = excluded.unit_value
            """, (entry.barcode, entry.item_type, str(entry.unit_value)))
            conn.commit()
        finally:
            conn.close()

    def fetch_catalog_entries(self) -> List[CatalogEntry]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT barcode, item_type, unit_value FROM catalog_entry ORDER BY barcode"
            )
            return [
                CatalogEntry(barcode=row[0], item_type=row[1], unit_value=Decimal(row[2]))
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def insert_account(self, credential: AccountCredential) -> None:
        """Insert a new account row.

        Row order is the leaderboard roster order, so accounts are only
        ever appended.

        Raises:
            sqlite3.IntegrityError: If the username or user id is already stored
        """
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "INSERT INTO account (user_id, username, secret) VALUES (?, ?, ?)",
                (credential.user_id, credential.username, credential.secret),
            )
            conn.commit()
        finally:
            conn.close()

    def fetch_accounts(self) -> List[AccountCredential]:
        """Fetch all accounts in registration order."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT username, secret, user_id FROM account ORDER BY id"
            )
            return [
                AccountCredential(username=row[0], secret=row[1], user_id=row[2])
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def insert_recycling_event(self, event: RecyclingEvent) -> None:
        """Append a single event to the ledger table.

        Args:
            event: The recycling event to record

        Raises:
            sqlite3.IntegrityError: If an event with the same id is already stored
        """
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                f"INSERT INTO recycling_event ({_EVENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                _event_params(event),
            )
            conn.commit()
        finally:
            conn.close()

    def fetch_recycling_events(
        self,
        owner_user_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[RecyclingEvent]:
        """Fetch ledger events in insertion order.

        Args:
            owner_user_id: Optional filter for a single user
            limit: Optional maximum number of events to return

        Returns:
            List of recycling events, oldest insertion first
        """
        conn = get_connection(self.db_path)
        try:
            query = f"SELECT {_EVENT_COLUMNS} FROM recycling_event"
            params = []

            if owner_user_id is not None:
                query += " WHERE owner_user_id = ?"
                params.append(owner_user_id)

            query += " ORDER BY seq"
            if limit is not None:
                query += " LIMIT ?"
                params.append(limit)

            cursor = conn.execute(query, params)
            return [_row_to_event(row) for row in cursor.fetchall()]
        finally:
            conn.close()
