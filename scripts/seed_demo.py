"""
Seed demo caregivers, availability and vaccine stock.
Run with: python -m scripts.seed_demo [--days 14] [--doses 20]
"""

import argparse
import asyncio
import random
from datetime import date, timedelta
from sqlalchemy import select, func
from scheduler.database import engine, async_session, create_tables
from scheduler.models.account import Caregiver
from scheduler.services.account_service import account_service
from scheduler.services.availability_service import availability_service
from scheduler.services.inventory_service import inventory_service
from scheduler.session import Identity, Role, Session

DEMO_PASSWORD = "Demo1234!"
DEMO_CAREGIVERS = ["c.adams", "c.baker", "c.chen", "c.diaz", "c.evans"]
VACCINES = ["moderna", "pfizer", "janssen", "novavax"]


async def seed(days: int, doses: int):
    await create_tables(engine)
    try:
        await _seed(days, doses)
    finally:
        await engine.dispose()


async def _seed(days: int, doses: int):
    async with async_session() as db:
        count = await db.scalar(select(func.count(Caregiver.username)))
        if count:
            print(f"Database already has {count} caregivers. Skipping seeding.")
            return

        print(f"Creating {len(DEMO_CAREGIVERS)} caregivers (password: {DEMO_PASSWORD})...")
        for username in DEMO_CAREGIVERS:
            await account_service.create_account(db, Role.CAREGIVER, username, DEMO_PASSWORD)

        print(f"Publishing availability for the next {days} days...")
        slots = 0
        for username in DEMO_CAREGIVERS:
            session = Session(Identity(role=Role.CAREGIVER, username=username))
            for offset in range(1, days + 1):
                # Roughly two working days in three
                if random.random() < 0.66:
                    await availability_service.upload_availability(db, session, date.today() + timedelta(days=offset))
                    slots += 1

        session = Session(Identity(role=Role.CAREGIVER, username=DEMO_CAREGIVERS[0]))
        for name in VACCINES:
            await inventory_service.add_doses(db, session, name, doses)

        await db.commit()
        print(f"Created {slots} slots and {doses} doses each of {', '.join(VACCINES)}.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo caregivers, availability and vaccine stock")
    parser.add_argument("--days", type=int, default=14, help="How many days ahead to publish availability")
    parser.add_argument("--doses", type=int, default=20, help="Doses to stock for each vaccine")
    args = parser.parse_args()

    asyncio.run(seed(days=args.days, doses=args.doses))
