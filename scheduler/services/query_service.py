from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.models.reservation import Reservation
from scheduler.models.vaccine import Vaccine
from scheduler.services.availability_service import availability_service
from scheduler.session import Session


@dataclass
class ScheduleView:
    date: date
    caregivers: list[str] = field(default_factory=list)
    vaccines: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class AppointmentView:
    id: int
    vaccine: str
    date: date
    counterparty: str


class QueryService:
    """Read-only listings. Nothing here writes to the store."""

    async def schedule_on(self, db: AsyncSession, session: Session, when: date) -> ScheduleView:
        session.require()
        caregivers = await availability_service.free_caregivers(db, when)
        result = await db.execute(
            select(Vaccine.name, Vaccine.doses).where(Vaccine.doses > 0).order_by(Vaccine.name)
        )
        return ScheduleView(
            date=when,
            caregivers=caregivers,
            vaccines=[(name, doses) for name, doses in result.all()],
        )

    async def my_reservations(self, db: AsyncSession, session: Session) -> list[AppointmentView]:
        identity = session.require()
        query = select(Reservation).order_by(Reservation.id)
        if identity.is_caregiver:
            query = query.where(Reservation.caregiver_name == identity.username)
        else:
            query = query.where(Reservation.patient_name == identity.username)

        result = await db.execute(query)
        return [
            AppointmentView(
                id=r.id,
                vaccine=r.vaccine_name,
                date=r.time,
                counterparty=r.patient_name if identity.is_caregiver else r.caregiver_name,
            )
            for r in result.scalars().all()
        ]


query_service = QueryService()
