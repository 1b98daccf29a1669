from sqlalchemy import TIMESTAMP, Column, Integer, String

from app.database.base import Base


class RateLimitWindow(Base):
    __tablename__ = "rate_limit_windows"

    key = Column(String(512), primary_key=True)
    count = Column(Integer, nullable=False, default=0)
    reset_at = Column(TIMESTAMP(timezone=True), nullable=False)
