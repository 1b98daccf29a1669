"""Shared FastAPI dependencies for authentication and collaborators."""

import logging
import uuid

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from supabase import AuthError, Client

from app.core.config import settings
from app.core.exceptions import (
    AuthProviderUnavailable,
    ConfigurationError,
    Forbidden,
    Unauthorized,
)
from app.database.errors import store_failure
from app.database.session import get_db
from app.models.profile import Profile
from app.models.seller_code import STATUS_CLAIMED, SellerCode
from app.services.session_issuer import SessionIssuer, SupabaseSessionIssuer
from app.services.supabase_client import get_supabase, supabase_configured

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_supabase_client() -> Client:
    if not supabase_configured():
        raise ConfigurationError("Supabase is not configured")
    return get_supabase()


def get_session_issuer(client: Client = Depends(get_supabase_client)) -> SessionIssuer:
    return SupabaseSessionIssuer(client)


def _seller_profile_id(db: Session, code_hash: str) -> uuid.UUID:
    try:
        record = (
            db.execute(select(SellerCode).where(SellerCode.code_hash == code_hash))
            .scalars()
            .one_or_none()
        )
    except SQLAlchemyError as e:
        raise store_failure("resolve seller principal", e) from e
    if record is None or record.status != STATUS_CLAIMED or record.claimed_by_profile_id is None:
        raise Unauthorized("Invalid authentication credentials")
    return record.claimed_by_profile_id


def _profile_id_for(user, db: Session) -> uuid.UUID:
    """Resolve the local profile behind an auth principal.

    Seller principals are keyed by code hash, so they resolve through the
    claimed seller code rather than provider-side metadata, which can outlive
    a rolled-back first claim. Other principals carry ``profile_id`` in
    metadata or share their id with the profile.
    """
    email = (getattr(user, "email", None) or "").lower()
    suffix = f"@{settings.SELLER_EMAIL_DOMAIN}".lower()
    if email.endswith(suffix):
        return _seller_profile_id(db, email[: -len(suffix)])

    metadata = getattr(user, "user_metadata", None) or {}
    raw = metadata.get("profile_id") or user.id
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise Unauthorized("Invalid authentication credentials")


def get_current_profile(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    client: Client = Depends(get_supabase_client),
    db: Session = Depends(get_db),
) -> Profile:
    """Verify a Supabase access token and return the caller's profile."""
    if not credentials:
        raise Unauthorized("Missing authorization header")

    try:
        user_response = client.auth.get_user(credentials.credentials)
    except AuthError as e:
        logger.info("Rejected access token: %s", e)
        raise Unauthorized("Invalid authentication credentials")
    except httpx.HTTPError as e:
        logger.error("Auth provider unreachable: %s", e)
        raise AuthProviderUnavailable() from e

    if not user_response or not user_response.user:
        raise Unauthorized("Invalid authentication credentials")

    profile_id = _profile_id_for(user_response.user, db)
    try:
        profile = db.get(Profile, profile_id)
    except SQLAlchemyError as e:
        raise store_failure("load caller profile", e) from e
    if profile is None:
        raise Unauthorized("Invalid authentication credentials")
    return profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role not in settings.ADMIN_ROLES:
        raise Forbidden("Admin access required")
    return profile
