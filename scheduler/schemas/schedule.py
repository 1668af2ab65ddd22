from pydantic import BaseModel, Field
from datetime import date
from scheduler.database import MAX_INTEGER


class VaccineStock(BaseModel):
    name: str
    doses: int


class ScheduleResponse(BaseModel):
    date: date
    caregivers: list[str] = []
    vaccines: list[VaccineStock] = []


class AvailabilityCreate(BaseModel):
    date: date


class DosesAdd(BaseModel):
    count: int = Field(..., ge=0, le=MAX_INTEGER)


class DosesResponse(BaseModel):
    name: str
    doses: int
