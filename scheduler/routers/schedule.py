from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from scheduler.auth import get_session
from scheduler.database import get_db
from scheduler.schemas.schedule import (
    AvailabilityCreate,
    DosesAdd,
    DosesResponse,
    ScheduleResponse,
    VaccineStock,
)
from scheduler.services.availability_service import availability_service
from scheduler.services.inventory_service import inventory_service
from scheduler.services.query_service import query_service
from scheduler.session import Session

router = APIRouter()


@router.get("/schedule/{day}", response_model=ScheduleResponse)
async def search_caregiver_schedule(
    day: date,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_session),
):
    view = await query_service.schedule_on(db, session, day)
    return ScheduleResponse(
        date=view.date,
        caregivers=view.caregivers,
        vaccines=[VaccineStock(name=name, doses=doses) for name, doses in view.vaccines],
    )


@router.post("/availability", status_code=201)
async def upload_availability(
    data: AvailabilityCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_session),
):
    await availability_service.upload_availability(db, session, data.date)
    return {"uploaded": True, "caregiver": session.identity.username, "date": data.date}


@router.post("/vaccines/{name}/doses", response_model=DosesResponse)
async def add_doses(
    name: str,
    data: DosesAdd,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_session),
):
    total = await inventory_service.add_doses(db, session, name, data.count)
    return DosesResponse(name=name, doses=total)
