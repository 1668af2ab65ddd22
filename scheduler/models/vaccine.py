from sqlalchemy import Column, Integer, String, CheckConstraint
from scheduler.database import Base


class Vaccine(Base):
    __tablename__ = "vaccines"
    __table_args__ = (CheckConstraint("doses >= 0", name="ck_vaccines_doses_non_negative"),)

    name = Column(String(255), primary_key=True)
    doses = Column(Integer, nullable=False, default=0)
