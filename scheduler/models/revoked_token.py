from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from scheduler.database import Base


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    username = Column(String(255), nullable=False)
    revoked_at = Column(DateTime(timezone=True), server_default=func.now())
