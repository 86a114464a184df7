# recycle_tracker/demo/seed_demo_data.py

from datetime import datetime, timedelta
from typing import Optional

from recycle_tracker.core.tracker import RecycleTracker

CATALOG_SEED = [
    ("1234567890", "Plastic Bottle", "0.05"),
    ("0987654321", "Aluminum Can", "0.10"),
    ("5678901234", "Glass Bottle", "0.15"),
    ("1357924680", "Plastic Milk Jug", "0.10"),
    ("2468013579", "Glass Beer Bottle", "0.15"),
    ("9876543210", "Aluminum Beer Can", "0.10"),
    ("0123456789", "Plastic Water Bottle", "0.05"),
]

DEMO_PASSWORD = "password"

# username -> barcodes recycled, oldest first
ACCOUNT_SEED = {
    "demo": ["1234567890", "0987654321", "5678901234"],
    "ecoWarrior": ["0123456789", "9876543210", "2468013579", "1357924680", "0987654321"],
    "recycleKing": [
        "0987654321", "9876543210", "5678901234", "2468013579",
        "1357924680", "0987654321", "9876543210", "5678901234",
    ],
    "greenEarth": ["1357924680", "5678901234", "0123456789", "9876543210"],
}


def seed_demo_data(tracker: RecycleTracker, now: Optional[datetime] = None) -> None:
    """Install the bootstrap catalog, accounts and sample events.

    "demo" becomes user1 with a plastic bottle a day ago, an aluminum can
    12 hours ago and a glass bottle now (3 items, $0.30, 0.50 impact).
    Accounts that already exist are left alone.
    """
    now = now or datetime.now()

    for barcode, item_type, value in CATALOG_SEED:
        tracker.register_item(barcode, item_type, value)

    for username, barcodes in ACCOUNT_SEED.items():
        if tracker.accounts.get(username) is not None:
            continue
        user_id = tracker.register_user(username, DEMO_PASSWORD)
        # Spread evenly over the last day, newest now
        step = timedelta(days=1) / max(len(barcodes) - 1, 1)
        for index, barcode in enumerate(barcodes):
            age = step * (len(barcodes) - 1 - index)
            tracker.record_scan(user_id, barcode, timestamp=now - age)


if __name__ == "__main__":
    from recycle_tracker.storage.repository import TrackerRepository

    seed_demo_data(RecycleTracker.create(repository=TrackerRepository()))
    print("Demo recycling data inserted")
