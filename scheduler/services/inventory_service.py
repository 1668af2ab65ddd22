import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.database import MAX_INTEGER
from scheduler.exceptions import OutOfStock, ValidationError, VaccineUnknown
from scheduler.models.vaccine import Vaccine
from scheduler.session import Role, Session

logger = logging.getLogger(__name__)


class InventoryService:
    """Per-vaccine available-dose counters."""

    async def get_vaccine(self, db: AsyncSession, name: str) -> Optional[Vaccine]:
        result = await db.execute(select(Vaccine).where(Vaccine.name == name))
        return result.scalar_one_or_none()

    async def add_doses(self, db: AsyncSession, session: Session, name: str, count: int) -> int:
        """Create the vaccine with `count` doses, or add `count` to its stock. Returns the new total."""
        caregiver = session.require(Role.CAREGIVER)
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValidationError("Number of doses must be a non-negative integer")
        if count > MAX_INTEGER:
            raise ValidationError("Number of doses is too large")

        result = await db.execute(
            update(Vaccine)
            .where(Vaccine.name == name, Vaccine.doses <= MAX_INTEGER - count)
            .values(doses=Vaccine.doses + count)
        )
        if result.rowcount == 0:
            if await self.get_vaccine(db, name) is not None:
                raise ValidationError("Number of doses is too large")
            db.add(Vaccine(name=name, doses=count))
            await db.flush()
        total = await db.scalar(select(Vaccine.doses).where(Vaccine.name == name))

        logger.info("Caregiver %s added %d doses of %s (now %d)", caregiver.username, count, name, total)
        return total

    async def reserve_dose(self, db: AsyncSession, name: str) -> None:
        """Take one dose. A single conditional update, so stock can never go below zero."""
        result = await db.execute(
            update(Vaccine)
            .where(Vaccine.name == name, Vaccine.doses > 0)
            .values(doses=Vaccine.doses - 1)
        )
        if result.rowcount == 1:
            return
        if await db.scalar(select(Vaccine.name).where(Vaccine.name == name)) is None:
            raise VaccineUnknown()
        raise OutOfStock()

    async def release_dose(self, db: AsyncSession, name: str) -> None:
        result = await db.execute(
            update(Vaccine).where(Vaccine.name == name).values(doses=Vaccine.doses + 1)
        )
        if result.rowcount != 1:
            raise VaccineUnknown()


inventory_service = InventoryService()
