import uuid

from sqlalchemy import TIMESTAMP, Column, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from app.database.base import Base, UUIDType


class Listing(Base):
    __tablename__ = "listings"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4, index=True)
    seller_id = Column(UUIDType, ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    country = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    price_usd = Column(Numeric(12, 2), nullable=False)
    status = Column(String, nullable=False, default="active")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    seller = relationship("Profile")
