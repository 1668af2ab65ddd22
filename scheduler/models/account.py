from sqlalchemy import Column, String, LargeBinary, DateTime
from sqlalchemy.sql import func
from scheduler.database import Base


class Patient(Base):
    __tablename__ = "patients"

    username = Column(String(255), primary_key=True)
    salt = Column(LargeBinary(16), nullable=False)
    hash = Column(LargeBinary(16), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Caregiver(Base):
    __tablename__ = "caregivers"

    username = Column(String(255), primary_key=True)
    salt = Column(LargeBinary(16), nullable=False)
    hash = Column(LargeBinary(16), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
