"""Seller code registry — issuance, claim/resume and revocation.

State machine::

    issued ──claim──▶ claimed ──revoke──▶ revoked
       └────────────revoke───────────────────▲

Codes are stored by hash only and never deleted. The ``issued → claimed``
transition is a conditional UPDATE on ``(id, status='issued')`` executed in
the same transaction that creates the seller identity, so concurrent first
claims of one code produce exactly one identity: the loser rolls back its
identity and resumes into the winner's.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    CodeNotFound,
    InvalidInput,
    NotFoundOrRevoked,
    PersistenceFailure,
)
from app.database.errors import store_failure
from app.models.seller_code import (
    STATUS_CLAIMED,
    STATUS_ISSUED,
    STATUS_REVOKED,
    SellerCode,
)
from app.services.identity import ROLE_SELLER, create_identity
from app.services.seller_codes import (
    generate_seller_code,
    hash_seller_code,
    is_valid_seller_code,
)

logger = logging.getLogger(__name__)

SELLER_CODE_STATUSES = (STATUS_ISSUED, STATUS_CLAIMED, STATUS_REVOKED)

# Called with (record, is_first_claim) before the claim commits.
Finalizer = Callable[[SellerCode, bool], Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class IssuedSellerCode:
    plaintext: str
    record: SellerCode


@dataclass
class ClaimResult:
    record: SellerCode
    is_first_claim: bool
    session: Any = None


class SellerCodeRegistry:
    def __init__(self, clock: Callable[[], datetime] = _utcnow, max_issue_attempts: int = 3):
        self.clock = clock
        self.max_issue_attempts = max_issue_attempts

    # -----------------------------------------------------------------------
    # Issuance
    # -----------------------------------------------------------------------

    def issue(self, db: Session, issuer_profile_id: Optional[uuid.UUID]) -> IssuedSellerCode:
        """Create a new ``issued`` code. The plaintext is returned exactly once."""
        last_error: Optional[IntegrityError] = None
        for attempt in range(1, self.max_issue_attempts + 1):
            plaintext = generate_seller_code()
            record = SellerCode(
                id=uuid.uuid4(),
                code_hash=hash_seller_code(plaintext),
                status=STATUS_ISSUED,
                issued_to_profile_id=issuer_profile_id,
            )
            db.add(record)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                last_error = e
                logger.warning("Seller code insert rejected on attempt %d", attempt)
                continue
            except SQLAlchemyError as e:
                db.rollback()
                raise store_failure("issue seller code", e) from e

            db.refresh(record)
            logger.info(
                "Issued seller code %s",
                record.id,
                extra={"seller_code_id": str(record.id), "issuer_profile_id": str(issuer_profile_id)},
            )
            return IssuedSellerCode(plaintext=plaintext, record=record)

        raise PersistenceFailure(
            f"could not insert a seller code after {self.max_issue_attempts} attempts: {last_error}",
        )

    # -----------------------------------------------------------------------
    # Lookup / claim
    # -----------------------------------------------------------------------

    def lookup(self, db: Session, plaintext: str) -> SellerCode:
        code_hash = hash_seller_code(plaintext)
        try:
            record = db.query(SellerCode).filter(SellerCode.code_hash == code_hash).first()
        except SQLAlchemyError as e:
            raise store_failure("lookup seller code", e) from e
        if record is None:
            raise NotFoundOrRevoked(reason="not_found")
        return record

    def claim_or_resume(
        self,
        db: Session,
        plaintext: str,
        contact_handle: Optional[str] = None,
        finalize: Optional[Finalizer] = None,
    ) -> ClaimResult:
        """Redeem a plaintext code.

        First redemption of an ``issued`` code creates the seller identity and
        moves the code to ``claimed``; later redemptions resolve to that same
        identity. ``finalize`` runs before anything is committed, and if it
        raises the code is left exactly as it was.
        """
        if not is_valid_seller_code(plaintext):
            raise InvalidInput("Invalid seller code format")

        record = self.lookup(db, plaintext)
        if record.status == STATUS_REVOKED:
            raise NotFoundOrRevoked(reason="revoked")

        if record.status == STATUS_ISSUED:
            result = self._claim(db, record, contact_handle, finalize)
            if result is not None:
                return result
            # Lost the race: another request committed the claim first.
            db.refresh(record)
            if record.status == STATUS_REVOKED:
                raise NotFoundOrRevoked(reason="revoked")

        if record.status != STATUS_CLAIMED:
            raise PersistenceFailure(f"seller code {record.id} has unknown status {record.status!r}")
        return self._resume(record, finalize)

    def _claim(
        self,
        db: Session,
        record: SellerCode,
        contact_handle: Optional[str],
        finalize: Optional[Finalizer],
    ) -> Optional[ClaimResult]:
        try:
            profile_id = create_identity(db, ROLE_SELLER, contact_handle)
            swapped = db.execute(
                update(SellerCode)
                .where(SellerCode.id == record.id, SellerCode.status == STATUS_ISSUED)
                .values(
                    status=STATUS_CLAIMED,
                    claimed_by_profile_id=profile_id,
                    claimed_at=self.clock(),
                )
                .execution_options(synchronize_session=False)
            ).rowcount
        except SQLAlchemyError as e:
            db.rollback()
            raise store_failure("claim seller code", e) from e

        if swapped != 1:
            db.rollback()
            logger.info("Seller code %s was claimed concurrently, resuming", record.id)
            return None

        session = None
        try:
            db.refresh(record)
            if finalize is not None:
                session = finalize(record, True)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise store_failure("claim seller code", e) from e
        except Exception:
            db.rollback()
            raise

        db.refresh(record)
        logger.info(
            "Seller code %s claimed by profile %s",
            record.id,
            record.claimed_by_profile_id,
            extra={"seller_code_id": str(record.id), "profile_id": str(record.claimed_by_profile_id)},
        )
        return ClaimResult(record=record, is_first_claim=True, session=session)

    def _resume(self, record: SellerCode, finalize: Optional[Finalizer]) -> ClaimResult:
        if record.claimed_by_profile_id is None:
            raise PersistenceFailure(f"seller code {record.id} is claimed but has no profile")

        session = finalize(record, False) if finalize is not None else None
        logger.info(
            "Seller code %s resumed by profile %s",
            record.id,
            record.claimed_by_profile_id,
            extra={"seller_code_id": str(record.id), "profile_id": str(record.claimed_by_profile_id)},
        )
        return ClaimResult(record=record, is_first_claim=False, session=session)

    # -----------------------------------------------------------------------
    # Revocation / listing
    # -----------------------------------------------------------------------

    def revoke(self, db: Session, code_id: uuid.UUID, issuer_profile_id: Optional[uuid.UUID]) -> SellerCode:
        """Move a code to ``revoked``. Revoking a revoked code is a no-op."""
        try:
            record = db.get(SellerCode, code_id)
        except SQLAlchemyError as e:
            raise store_failure("revoke seller code", e) from e
        if record is None:
            raise CodeNotFound()

        if record.status == STATUS_REVOKED:
            logger.info("Seller code %s already revoked", record.id)
            return record

        previous = record.status
        record.status = STATUS_REVOKED
        record.revoked_at = self.clock()
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise store_failure("revoke seller code", e) from e

        db.refresh(record)
        logger.info(
            "Seller code %s revoked (was %s) by profile %s",
            record.id,
            previous,
            issuer_profile_id,
            extra={"seller_code_id": str(record.id), "issuer_profile_id": str(issuer_profile_id)},
        )
        return record

    def list_codes(
        self,
        db: Session,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SellerCode]:
        if status is not None and status not in SELLER_CODE_STATUSES:
            raise InvalidInput(f"Unknown status {status!r}")
        query = db.query(SellerCode)
        if status is not None:
            query = query.filter(SellerCode.status == status)
        try:
            return (
                query.order_by(SellerCode.created_at.desc(), SellerCode.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            raise store_failure("list seller codes", e) from e


seller_code_registry = SellerCodeRegistry()
