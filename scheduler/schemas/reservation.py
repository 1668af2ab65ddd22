from pydantic import BaseModel
from datetime import date


class ReservationCreate(BaseModel):
    date: date
    vaccine: str


class ReservationResponse(BaseModel):
    id: int
    caregiver: str
    date: date
    vaccine: str
    patient: str

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: int
    vaccine: str
    date: date
    counterparty: str

    class Config:
        from_attributes = True


class AppointmentListResponse(BaseModel):
    appointments: list[AppointmentResponse]
    total: int
