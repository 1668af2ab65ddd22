"""
Reservation engine.

A reservation consumes one caregiver slot and one vaccine dose and records the
binding; cancellation gives both back. Each operation is one transaction on the
caller's session: it commits on success and rolls back before any error leaves
this module, so a failed reserve or cancel never changes the ledgers.

Within a process, reserve and cancel for the same date run one at a time under
an asyncio lock. Across processes the store decides: the slot claim and the
dose decrement are single conditional statements, and (time, caregiver_name)
is unique on reservations.
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.database import MAX_INTEGER
from scheduler.exceptions import (
    NoCaregiverAvailable,
    NotOwner,
    ReservationNotFound,
    SchedulerError,
    StoreError,
)
from scheduler.models.reservation import Reservation
from scheduler.services.availability_service import availability_service
from scheduler.services.inventory_service import inventory_service
from scheduler.session import Identity, Role, Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservationResult:
    id: int
    caregiver: str
    date: date
    vaccine: str
    patient: str


class ReservationService:
    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[date, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, when: date) -> asyncio.Lock:
        lock = self._locks.get(when)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[when] = lock
        return lock

    async def reserve(self, db: AsyncSession, session: Session, when: date, vaccine_name: str) -> ReservationResult:
        patient = session.require(Role.PATIENT)

        async with self._lock_for(when):
            try:
                candidates = await availability_service.free_caregivers(db, when)
                if not candidates:
                    raise NoCaregiverAvailable()

                # Dose first: if stock is short no slot has been touched
                await inventory_service.reserve_dose(db, vaccine_name)

                caregiver = None
                for candidate in candidates:
                    if await availability_service.remove_slot(db, candidate, when):
                        caregiver = candidate
                        break
                if caregiver is None:
                    raise NoCaregiverAvailable()

                reservation = Reservation(
                    time=when,
                    caregiver_name=caregiver,
                    vaccine_name=vaccine_name,
                    patient_name=patient.username,
                )
                db.add(reservation)
                await db.flush()
                reservation_id = reservation.id
                await db.commit()
            except SchedulerError:
                await db.rollback()
                raise
            except IntegrityError as e:
                await db.rollback()
                logger.warning("Reservation on %s lost a race for a caregiver: %s", when, e.orig)
                raise NoCaregiverAvailable() from e
            except SQLAlchemyError as e:
                await db.rollback()
                logger.exception("Store failure while reserving %s on %s for %s", vaccine_name, when, patient.username)
                raise StoreError() from e

        logger.info(
            "Reservation %d: patient %s with caregiver %s on %s (%s)",
            reservation_id, patient.username, caregiver, when, vaccine_name,
        )
        return ReservationResult(
            id=reservation_id,
            caregiver=caregiver,
            date=when,
            vaccine=vaccine_name,
            patient=patient.username,
        )

    async def get_reservation(self, db: AsyncSession, reservation_id: int):
        if not 0 < reservation_id <= MAX_INTEGER:
            return None
        result = await db.execute(select(Reservation).where(Reservation.id == reservation_id))
        return result.scalar_one_or_none()

    @staticmethod
    def _check_owner(identity: Identity, reservation: Reservation) -> None:
        if identity.is_patient:
            owner = reservation.patient_name
        else:
            owner = reservation.caregiver_name
        if owner != identity.username:
            raise NotOwner()

    async def cancel(self, db: AsyncSession, session: Session, reservation_id: int) -> ReservationResult:
        identity = session.require()

        try:
            reservation = await self.get_reservation(db, reservation_id)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception("Store failure while looking up reservation %s", reservation_id)
            raise StoreError() from e
        if reservation is None:
            raise ReservationNotFound()
        self._check_owner(identity, reservation)

        cancelled = ReservationResult(
            id=reservation.id,
            caregiver=reservation.caregiver_name,
            date=reservation.time,
            vaccine=reservation.vaccine_name,
            patient=reservation.patient_name,
        )

        async with self._lock_for(cancelled.date):
            try:
                result = await db.execute(delete(Reservation).where(Reservation.id == reservation_id))
                if result.rowcount != 1:
                    # Cancelled by the other party in the meantime
                    raise ReservationNotFound()
                await availability_service.restore_slot(db, cancelled.caregiver, cancelled.date)
                await inventory_service.release_dose(db, cancelled.vaccine)
                await db.commit()
            except SchedulerError:
                await db.rollback()
                raise
            except SQLAlchemyError as e:
                await db.rollback()
                logger.exception("Store failure while cancelling reservation %s", reservation_id)
                raise StoreError() from e

        logger.info(
            "Reservation %d cancelled by %s %s", reservation_id, identity.role.value, identity.username,
        )
        return cancelled


reservation_service = ReservationService()
