from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from scheduler.database import Base


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (UniqueConstraint("time", "caregiver_name", name="uq_reservations_caregiver_day"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    time = Column(Date, nullable=False, index=True)
    caregiver_name = Column(String(255), ForeignKey("caregivers.username"), nullable=False, index=True)
    vaccine_name = Column(String(255), ForeignKey("vaccines.name"), nullable=False)
    patient_name = Column(String(255), ForeignKey("patients.username"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
