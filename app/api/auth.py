"""Seller login with a seller code (no password, no email)."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.dependencies import get_session_issuer
from app.core.config import settings
from app.core.exceptions import InvalidInput, NotFoundOrRevoked, PersistenceFailure
from app.database.session import get_db
from app.models.profile import Profile
from app.models.seller_code import SellerCode
from app.services.code_registry import seller_code_registry
from app.services.identity import ROLE_SELLER
from app.services.rate_limit import FixedWindowRateLimiter, client_ip, get_rate_limiter, rate_limit_key
from app.services.session_issuer import SessionIssuer, seller_account_handle
from app.services.whatsapp import is_valid_phone, normalize_phone

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class LoginWithCodeRequest(BaseModel):
    # Checked in the handler so that wrong JSON types are a 400, not a 422.
    code: Any = None
    whatsapp: Any = None


class SellerUser(BaseModel):
    id: str
    email: str
    role: str


class ProfileResponse(BaseModel):
    id: str
    role: str
    whatsapp: str | None
    created_at: str | None
    updated_at: str | None


class LoginWithCodeResponse(BaseModel):
    user: SellerUser
    profile: ProfileResponse
    session_url: str
    is_new_user: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _redirect_target(request: Request) -> str:
    origin = request.headers.get("origin")
    if origin and origin in settings.CORS_ORIGINS:
        return f"{origin}/"
    return f"{settings.SITE_URL.rstrip('/')}/"


def _contact_handle(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise InvalidInput("Invalid WhatsApp number format")
    if not raw.strip():
        return None
    phone = normalize_phone(raw)
    if not is_valid_phone(phone):
        raise InvalidInput("Invalid WhatsApp number format")
    return phone


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/login-with-code", response_model=LoginWithCodeResponse)
def login_with_code(
    body: LoginWithCodeRequest,
    request: Request,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
):
    """Claim a seller code on first use, or log back in with a claimed one."""
    ip = client_ip(request)
    limiter.enforce(db, rate_limit_key("seller_login", ip))

    contact_handle = _contact_handle(body.whatsapp)
    redirect_to = _redirect_target(request)

    def mint_session(record: SellerCode, is_first_claim: bool) -> str:
        handle = seller_account_handle(record.code_hash)
        if is_first_claim:
            issuer.provision(handle, record.claimed_by_profile_id)
        return issuer.issue_session(handle, redirect_to)

    try:
        result = seller_code_registry.claim_or_resume(
            db,
            body.code if body.code is not None else "",
            contact_handle=contact_handle,
            finalize=mint_session,
        )
    except NotFoundOrRevoked as e:
        logger.warning(
            "Seller code rejected (%s)",
            e.reason,
            extra={"reason": e.reason, "client_ip": ip},
        )
        raise

    record = result.record
    profile = db.get(Profile, record.claimed_by_profile_id)
    if profile is None:
        raise PersistenceFailure(f"profile {record.claimed_by_profile_id} for seller code {record.id} is missing")

    return LoginWithCodeResponse(
        user=SellerUser(
            id=str(profile.id),
            email=seller_account_handle(record.code_hash),
            role=ROLE_SELLER,
        ),
        profile=ProfileResponse(
            id=str(profile.id),
            role=profile.role,
            whatsapp=profile.whatsapp,
            created_at=profile.created_at.isoformat() if profile.created_at else None,
            updated_at=profile.updated_at.isoformat() if profile.updated_at else None,
        ),
        session_url=result.session,
        is_new_user=result.is_first_claim,
    )
