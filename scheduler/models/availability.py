from sqlalchemy import Column, Date, String, ForeignKey
from scheduler.database import Base


class Availability(Base):
    __tablename__ = "availabilities"

    # One row per (date, caregiver): a caregiver either has capacity on a date or not
    time = Column(Date, primary_key=True)
    username = Column(String(255), ForeignKey("caregivers.username"), primary_key=True, index=True)
