import uuid

from sqlalchemy import TIMESTAMP, Boolean, Column, Float, Integer, String, func

from app.database.base import Base, UUIDType


class AdminProfile(Base):
    """Public directory entry for an escrow admin."""

    __tablename__ = "admin_profiles"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String, nullable=False)
    whatsapp = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    verified = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)
    rating = Column(Float, nullable=False, default=0)
    deals = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
