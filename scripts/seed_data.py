"""Seed script to populate the database with sample communities and readings."""

import random
from datetime import date, timedelta
from decimal import Decimal

from app.core.database import Base, SessionLocal, engine
from app.models.community import Community
from app.models.unit import Unit
from app.services.reading_store import SqlReadingStore

COMMUNITIES = {
    "Maple Grove": ["A101", "A102", "A103", "A104"],
    "Riverside Commons": ["B201", "B202", "B203"],
}


def seed_database(days: int = 90) -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # Check if data already exists
        if db.query(Community).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")
        store = SqlReadingStore(db)
        rng = random.Random(42)
        today = date.today()

        for name, unit_numbers in COMMUNITIES.items():
            community = Community(name=name)
            db.add(community)
            db.commit()
            db.refresh(community)
            print(f"Created community: {community.name} (ID: {community.id})")

            for unit_number in unit_numbers:
                unit = Unit(community_id=community.id, unit_number=unit_number)
                db.add(unit)
                db.commit()
                db.refresh(unit)

                base_water = rng.uniform(80, 160)
                base_electricity = rng.uniform(15, 45)
                for offset in range(0, days, 7):
                    store.upsert_reading(
                        unit.id,
                        today - timedelta(days=offset),
                        Decimal(f"{base_water * rng.uniform(0.8, 1.2):.2f}"),
                        Decimal(f"{base_electricity * rng.uniform(0.8, 1.2):.2f}"),
                    )
                print(f"  Created unit {unit.unit_number} with readings")

        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
