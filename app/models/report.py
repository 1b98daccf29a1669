import uuid

from sqlalchemy import TIMESTAMP, Column, String, Text, func

from app.database.base import Base, UUIDType

REPORT_TARGET_TYPES = ("admin", "listing")


class Report(Base):
    __tablename__ = "reports"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4, index=True)
    type = Column(String, nullable=False)  # admin, listing
    target_id = Column(UUIDType, nullable=False, index=True)
    message = Column(Text, nullable=True)
    from_ip = Column(String, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
