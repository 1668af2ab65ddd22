from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from scheduler.auth import get_session
from scheduler.database import MAX_INTEGER, get_db
from scheduler.schemas.reservation import (
    AppointmentListResponse,
    AppointmentResponse,
    ReservationCreate,
    ReservationResponse,
)
from scheduler.services.query_service import query_service
from scheduler.services.reservation_service import reservation_service
from scheduler.session import Session

router = APIRouter()


@router.post("", response_model=ReservationResponse, status_code=201)
async def reserve(
    req: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_session),
):
    result = await reservation_service.reserve(db, session, req.date, req.vaccine)
    return ReservationResponse.model_validate(result)


@router.get("", response_model=AppointmentListResponse)
async def show_appointments(db: AsyncSession = Depends(get_db), session: Session = Depends(get_session)):
    appointments = await query_service.my_reservations(db, session)
    return AppointmentListResponse(
        appointments=[AppointmentResponse.model_validate(a) for a in appointments],
        total=len(appointments),
    )


@router.delete("/{reservation_id}")
async def cancel(
    reservation_id: int = Path(..., ge=1, le=MAX_INTEGER),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_session),
):
    cancelled = await reservation_service.cancel(db, session, reservation_id)
    return {"cancelled": True, "reservation_id": cancelled.id}
