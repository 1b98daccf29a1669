"""Admin routes — seller code issuance, listing and revocation."""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.dependencies import require_admin
from app.database.session import get_db
from app.models.profile import Profile
from app.models.seller_code import SellerCode
from app.services.code_registry import seller_code_registry

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class IssuedSellerCodeResponse(BaseModel):
    codePlain: str
    id: str
    status: str


class SellerCodeResponse(BaseModel):
    id: str
    status: str
    issued_to_profile_id: str | None
    claimed_by_profile_id: str | None
    claimed_at: str | None
    revoked_at: str | None
    created_at: str | None


def _to_response(code: SellerCode) -> SellerCodeResponse:
    return SellerCodeResponse(
        id=str(code.id),
        status=code.status,
        issued_to_profile_id=str(code.issued_to_profile_id) if code.issued_to_profile_id else None,
        claimed_by_profile_id=str(code.claimed_by_profile_id) if code.claimed_by_profile_id else None,
        claimed_at=code.claimed_at.isoformat() if code.claimed_at else None,
        revoked_at=code.revoked_at.isoformat() if code.revoked_at else None,
        created_at=code.created_at.isoformat() if code.created_at else None,
    )


# ---------------------------------------------------------------------------
# Seller codes
# ---------------------------------------------------------------------------

@router.post("/seller-codes", response_model=IssuedSellerCodeResponse, status_code=status.HTTP_201_CREATED)
def issue_seller_code(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Issue a new seller code. The plaintext is only ever returned here."""
    issued = seller_code_registry.issue(db, issuer_profile_id=admin.id)
    return IssuedSellerCodeResponse(
        codePlain=issued.plaintext,
        id=str(issued.record.id),
        status=issued.record.status,
    )


@router.get("/seller-codes", response_model=List[SellerCodeResponse])
def list_seller_codes(
    status_filter: str | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    codes = seller_code_registry.list_codes(db, status=status_filter, limit=limit, offset=offset)
    return [_to_response(c) for c in codes]


@router.post("/seller-codes/{code_id}/revoke", response_model=SellerCodeResponse)
def revoke_seller_code(
    code_id: uuid.UUID,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    code = seller_code_registry.revoke(db, code_id, issuer_profile_id=admin.id)
    return _to_response(code)
