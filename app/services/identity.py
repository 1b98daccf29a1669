"""Identity creation for newly claimed seller codes."""

import logging
import uuid

from sqlalchemy.orm import Session

from app.models.profile import Profile

logger = logging.getLogger(__name__)

ROLE_SELLER = "seller"


def create_identity(db: Session, role: str, contact_handle: str | None = None) -> uuid.UUID:
    """Insert a profile inside the caller's transaction and return its id.

    The row is flushed, not committed: the caller decides whether the claim
    that needed this identity goes through.
    """
    profile = Profile(id=uuid.uuid4(), role=role, whatsapp=contact_handle)
    db.add(profile)
    db.flush()
    logger.info("Created %s identity %s", role, profile.id)
    return profile.id
