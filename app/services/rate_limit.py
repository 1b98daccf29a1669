"""Fixed-window rate limiting backed by a shared counter store.

Counters live in the database rather than process memory so that every API
instance sees the same window for a client.
"""

import hashlib
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import RateLimited
from app.database.errors import store_failure
from app.models.rate_limit_window import RateLimitWindow

logger = logging.getLogger(__name__)

_MAX_KEY_LENGTH = 512


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_key(scope: str, ip: str) -> str:
    raw = f"{scope}|{ip}"
    if len(raw) <= _MAX_KEY_LENGTH:
        return raw
    return f"{scope}|sha256:{hashlib.sha256(raw.encode('utf-8')).hexdigest()}"


@dataclass(frozen=True)
class CounterState:
    count: int
    reset_at: datetime


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after_seconds: int


class SqlCounterStore:
    """Keyed window counters in the ``rate_limit_windows`` table."""

    def __init__(self, max_attempts: int = 2):
        self.max_attempts = max_attempts

    def increment(self, db: Session, key: str, now: datetime, window: timedelta) -> CounterState:
        """Count one hit for ``key``, opening a new window if the last one ended."""
        last_error = None
        for _ in range(self.max_attempts):
            try:
                row = (
                    db.execute(
                        select(RateLimitWindow)
                        .where(RateLimitWindow.key == key)
                        .with_for_update()
                    )
                    .scalars()
                    .one_or_none()
                )
                if row is None:
                    row = RateLimitWindow(key=key, count=1, reset_at=now + window)
                    db.add(row)
                elif _as_utc(row.reset_at) <= now:
                    row.count = 1
                    row.reset_at = now + window
                else:
                    row.count = int(row.count) + 1
                state = CounterState(count=int(row.count), reset_at=_as_utc(row.reset_at))
                db.commit()
                return state
            except IntegrityError as e:
                # Another instance opened the window first; read its row.
                db.rollback()
                last_error = e
            except SQLAlchemyError as e:
                db.rollback()
                raise store_failure("rate limit increment", e) from e
        raise store_failure("rate limit increment", last_error) from last_error


class FixedWindowRateLimiter:
    def __init__(
        self,
        store: SqlCounterStore,
        capacity: int,
        window_seconds: int,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.capacity = int(capacity)
        self.window = timedelta(seconds=int(window_seconds))
        self.clock = clock

    def hit(self, db: Session, key: str) -> RateLimitDecision:
        now = self.clock()
        state = self.store.increment(db, key, now, self.window)
        if state.count <= self.capacity:
            return RateLimitDecision(
                allowed=True,
                remaining=self.capacity - state.count,
                retry_after_seconds=0,
            )
        retry_after = max(math.ceil((state.reset_at - now).total_seconds()), 0)
        return RateLimitDecision(allowed=False, remaining=0, retry_after_seconds=retry_after)

    def enforce(self, db: Session, key: str) -> RateLimitDecision:
        """Count a hit and raise ``RateLimited`` when the window is exhausted."""
        decision = self.hit(db, key)
        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded for %s",
                key,
                extra={"rate_limit_key": key, "retry_after": decision.retry_after_seconds},
            )
            raise RateLimited(retry_after_seconds=decision.retry_after_seconds)
        return decision


_limiter: Optional[FixedWindowRateLimiter] = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    global _limiter
    if _limiter is None:
        _limiter = FixedWindowRateLimiter(
            SqlCounterStore(),
            capacity=settings.RATE_LIMIT_CAPACITY,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    return _limiter
