import uuid

from sqlalchemy import TIMESTAMP, Column, ForeignKey, String, func

from app.database.base import Base, UUIDType

STATUS_ISSUED = "issued"
STATUS_CLAIMED = "claimed"
STATUS_REVOKED = "revoked"


class SellerCode(Base):
    __tablename__ = "seller_codes"

    id = Column(UUIDType, primary_key=True, default=uuid.uuid4, index=True)
    code_hash = Column(String(64), nullable=False, unique=True, index=True)
    status = Column(String, nullable=False, default=STATUS_ISSUED)  # issued, claimed, revoked
    issued_to_profile_id = Column(UUIDType, ForeignKey("profiles.id"), nullable=True)
    claimed_by_profile_id = Column(UUIDType, ForeignKey("profiles.id"), nullable=True, index=True)
    claimed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    revoked_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
