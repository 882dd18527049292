#!/usr/bin/env python3
"""
Create the Lunchly tables and optionally seed a few demo customers.

Usage:
    python scripts/init_db.py              # create tables only
    python scripts/init_db.py --seed-demo  # create tables + demo data (skipped if customers exist)
"""

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import func

from app.lunchly.models import Base
from app.lunchly.modules.customers.models import Customer
from app.lunchly.modules.customers.service import CustomerStore
from app.lunchly.modules.reservations.models import Reservation
from app.lunchly.modules.reservations.service import ReservationStore
from scripts._db_utils import create_script_engine, script_session

DEMO_CUSTOMERS = (
    # first, last, phone, notes, [(num_guests, start_at)]
    ("Anthony", "Gonzales", "555-0101", "Prefers the patio.", [(2, "2026-09-08 12:20"), (4, "2026-10-02 19:00")]),
    ("Tina", "Hsu", "555-0102", None, [(6, "2026-09-15 18:30")]),
    ("Marcus", "Reed", None, "Allergic to shellfish.", []),
)


def create_tables(database_url: str) -> None:
    engine = create_script_engine(database_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()


def seed_demo(database_url: str) -> int:
    """Insert demo customers through the stores. Returns the number of customers added."""
    with script_session(database_url) as s:
        existing = s.query(func.count(Customer.id)).scalar()
        if existing:
            print(f"{existing} customers already present; skipping demo seed.", flush=True)
            return 0

        customers = CustomerStore(s)
        reservations = ReservationStore(s)
        for first, last, phone, notes, bookings in DEMO_CUSTOMERS:
            c = Customer(first_name=first, last_name=last, phone=phone, notes=notes)
            customers.save(c)
            for num_guests, start_at in bookings:
                reservations.save(
                    Reservation(
                        customer_id=c.id,
                        num_guests=num_guests,
                        start_at=datetime.strptime(start_at, "%Y-%m-%d %H:%M"),
                    )
                )
        return len(DEMO_CUSTOMERS)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create Lunchly tables and optional demo data.")
    parser.add_argument("--database-url", default=None, help="Defaults to $DATABASE_URL or sqlite:///lunchly.db")
    parser.add_argument("--seed-demo", action="store_true", help="Insert demo customers and reservations")
    args = parser.parse_args()

    db_url = (args.database_url or os.environ.get("DATABASE_URL") or "sqlite:///lunchly.db").strip()
    create_tables(db_url)
    print("Tables ready.", flush=True)
    if args.seed_demo:
        added = seed_demo(db_url)
        print(f"Seeded {added} demo customers.", flush=True)


if __name__ == "__main__":
    main()
