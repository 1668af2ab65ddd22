import logging
from datetime import date
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.models.availability import Availability
from scheduler.models.reservation import Reservation
from scheduler.session import Role, Session

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class AvailabilityService:
    """Per-caregiver, per-date open slots. A slot is a set member keyed by (date, caregiver)."""

    async def add_slot(self, db: AsyncSession, caregiver: str, when: date) -> None:
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is not None:
            stmt = insert(Availability).values(time=when, username=caregiver).on_conflict_do_nothing()
            await db.execute(stmt)
            return

        existing = await db.scalar(
            select(Availability.username).where(Availability.time == when, Availability.username == caregiver)
        )
        if existing is None:
            db.add(Availability(time=when, username=caregiver))
            await db.flush()

    async def upload_availability(self, db: AsyncSession, session: Session, when: date) -> None:
        caregiver = session.require(Role.CAREGIVER)
        await self.add_slot(db, caregiver.username, when)
        logger.info("Caregiver %s uploaded availability for %s", caregiver.username, when)

    def _free_caregivers_query(self, when: date):
        booked = (
            select(Reservation.id)
            .where(Reservation.time == when, Reservation.caregiver_name == Availability.username)
            .exists()
        )
        return (
            select(Availability.username)
            .where(Availability.time == when, ~booked)
            .order_by(Availability.username)
        )

    async def free_caregivers(self, db: AsyncSession, when: date) -> list[str]:
        """Caregivers with a slot on `when` and no reservation that day, ascending by username."""
        result = await db.execute(self._free_caregivers_query(when))
        return list(result.scalars().all())

    async def find_free_caregiver(self, db: AsyncSession, when: date) -> Optional[str]:
        return await db.scalar(self._free_caregivers_query(when).limit(1))

    async def remove_slot(self, db: AsyncSession, caregiver: str, when: date) -> bool:
        """Claim a slot. Returns False if it was already gone."""
        result = await db.execute(
            delete(Availability).where(Availability.time == when, Availability.username == caregiver)
        )
        return result.rowcount == 1

    async def restore_slot(self, db: AsyncSession, caregiver: str, when: date) -> None:
        await self.add_slot(db, caregiver, when)


availability_service = AvailabilityService()
