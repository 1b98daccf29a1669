import uuid

from sqlalchemy import TIMESTAMP, Column, String, func

from app.database.base import Base, UUIDType


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4, index=True)
    role = Column(String, nullable=False, default="seller")  # seller, admin, superadmin
    whatsapp = Column(String, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
