"""Anonymous abuse reports against listings and admin profiles."""

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInput, TargetNotFound
from app.database.errors import store_failure
from app.database.session import get_db
from app.models.admin_profile import AdminProfile
from app.models.listing import Listing
from app.models.report import REPORT_TARGET_TYPES, Report
from app.services.rate_limit import FixedWindowRateLimiter, client_ip, get_rate_limiter, rate_limit_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

_TARGET_MODELS = {
    "admin": (AdminProfile, "Admin not found"),
    "listing": (Listing, "Listing not found"),
}


class ReportCreateRequest(BaseModel):
    # Checked in the handler so that wrong JSON types are a 400, not a 422.
    type: Any = None
    target_id: Any = None
    message: Any = None


class ReportCreateResponse(BaseModel):
    success: bool
    report_id: str
    message: str


def _validate(body: ReportCreateRequest) -> None:
    if (
        not isinstance(body.type, str)
        or body.type not in REPORT_TARGET_TYPES
        or not isinstance(body.target_id, str)
        or not body.target_id
    ):
        raise InvalidInput("Valid type and target_id are required")
    if body.message is not None and not isinstance(body.message, str):
        raise InvalidInput("message must be a string")


def _parse_target_id(raw: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(raw)
    except ValueError:
        return None


@router.post("", response_model=ReportCreateResponse, status_code=status.HTTP_201_CREATED)
def submit_report(
    body: ReportCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
):
    _validate(body)

    ip = client_ip(request)
    limiter.enforce(db, rate_limit_key("report", ip))

    model, not_found = _TARGET_MODELS[body.type]
    # A malformed id names no row, same as an unknown one.
    target_id = _parse_target_id(body.target_id)
    if target_id is None:
        raise TargetNotFound(not_found)
    try:
        target = db.get(model, target_id)
    except SQLAlchemyError as e:
        raise store_failure("load report target", e) from e
    if target is None:
        raise TargetNotFound(not_found)

    report = Report(
        type=body.type,
        target_id=target_id,
        message=body.message or None,
        from_ip=ip,
    )
    db.add(report)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise store_failure("insert report", e) from e
    db.refresh(report)

    logger.info("Report %s filed against %s %s", report.id, report.type, report.target_id)
    return ReportCreateResponse(
        success=True,
        report_id=str(report.id),
        message="Report submitted successfully",
    )
