"""
OTP Store
=========
Tracks outstanding challenges keyed by account id.

Every state transition for one account runs under that account's lock;
different accounts never contend.
"""

import asyncio
import dataclasses
import weakref
from abc import ABC, abstractmethod
from datetime import datetime, timezone, timedelta
from typing import Callable, Dict, Optional
import structlog

from .codes import codes_match
from .exceptions import (
    AlreadyConsumed,
    CodeExpired,
    InvalidCode,
    RecordNotFound,
    TooManyAttempts,
)
from .models import OTPRecord

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OTPStore(ABC):
    """Abstract storage for OTP records."""

    def now(self) -> datetime:
        """The time expiry is judged against."""
        return utc_now()

    @abstractmethod
    async def put(
        self,
        account_id: str,
        code: str,
        validity_window: timedelta,
        max_attempts: Optional[int] = None,
    ) -> OTPRecord:
        """
        Store a new record, superseding any prior one for the account.

        The prior record becomes permanently unverifiable even if it had
        not expired yet.
        """

    @abstractmethod
    async def get(self, account_id: str) -> OTPRecord:
        """
        Read-only lookup.

        Raises:
            RecordNotFound: If the account has no record
        """

    @abstractmethod
    async def record_attempt(self, account_id: str) -> int:
        """
        Count one failed verification attempt.

        Returns:
            The updated attempt count

        Raises:
            RecordNotFound, AlreadyConsumed, CodeExpired
            TooManyAttempts: If the cap was already reached (not incremented)
        """

    @abstractmethod
    async def consume(self, account_id: str) -> OTPRecord:
        """
        Mark the record consumed.

        Raises:
            RecordNotFound, AlreadyConsumed, CodeExpired, TooManyAttempts
        """

    @abstractmethod
    async def check_and_consume(self, account_id: str, submitted_code: str) -> OTPRecord:
        """
        Match a submitted code and consume the record in one step.

        Raises:
            RecordNotFound, AlreadyConsumed, CodeExpired, TooManyAttempts
            InvalidCode: If the code did not match and attempts remain
        """

    @abstractmethod
    async def delete(self, account_id: str) -> bool:
        """Drop the account's record. Returns True if one existed."""

    @abstractmethod
    async def purge_expired(self, grace: timedelta = timedelta(0)) -> int:
        """Remove records expired for longer than ``grace``."""


class InMemoryOTPStore(OTPStore):
    """
    In-process OTP store.

    Suitable for a single worker process and for tests. Per-account locks
    are held in a weak-value map, so a lock lives exactly as long as some
    coroutine is using it.
    """

    def __init__(self, max_attempts: int = 5, clock: Optional[Clock] = None):
        """
        Args:
            max_attempts: Default failed-attempt cap for new records
            clock: Returns the current aware datetime (defaults to UTC now)
        """
        self.max_attempts = max_attempts
        self._clock = clock or utc_now
        self._records: Dict[str, OTPRecord] = {}
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._records)

    def now(self) -> datetime:
        return self._clock()

    def _lock_for(self, account_id: str) -> asyncio.Lock:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[account_id] = lock
        return lock

    def _require(self, account_id: str) -> OTPRecord:
        record = self._records.get(account_id)
        if record is None:
            raise RecordNotFound("No active challenge", account_id=account_id)
        return record

    def _ensure_open(self, record: OTPRecord) -> None:
        if record.consumed:
            raise AlreadyConsumed("Code already used", account_id=record.account_id)
        if record.is_expired(self._clock()):
            raise CodeExpired("Code expired", account_id=record.account_id)

    def _increment(self, record: OTPRecord) -> int:
        if record.is_locked:
            raise TooManyAttempts("Too many attempts", account_id=record.account_id)
        record.attempt_count += 1
        return record.attempt_count

    def _consume(self, record: OTPRecord) -> OTPRecord:
        if record.is_locked:
            raise TooManyAttempts("Too many attempts", account_id=record.account_id)
        record.consumed = True
        return dataclasses.replace(record)

    async def put(
        self,
        account_id: str,
        code: str,
        validity_window: timedelta,
        max_attempts: Optional[int] = None,
    ) -> OTPRecord:
        now = self._clock()
        record = OTPRecord(
            account_id=account_id,
            code=code,
            issued_at=now,
            expires_at=now + validity_window,
            max_attempts=max_attempts or self.max_attempts,
        )

        async with self._lock_for(account_id):
            superseded = self._records.get(account_id)
            self._records[account_id] = record

        if superseded is not None and superseded.is_active(now):
            logger.info("OTP challenge superseded", account_id=account_id)

        return dataclasses.replace(record)

    async def get(self, account_id: str) -> OTPRecord:
        async with self._lock_for(account_id):
            return dataclasses.replace(self._require(account_id))

    async def record_attempt(self, account_id: str) -> int:
        async with self._lock_for(account_id):
            record = self._require(account_id)
            self._ensure_open(record)
            return self._increment(record)

    async def consume(self, account_id: str) -> OTPRecord:
        async with self._lock_for(account_id):
            record = self._require(account_id)
            self._ensure_open(record)
            return self._consume(record)

    async def check_and_consume(self, account_id: str, submitted_code: str) -> OTPRecord:
        async with self._lock_for(account_id):
            record = self._require(account_id)
            self._ensure_open(record)

            if record.is_locked:
                raise TooManyAttempts("Too many attempts", account_id=account_id)

            if not codes_match(submitted_code, record.code):
                count = self._increment(record)
                if record.is_locked:
                    raise TooManyAttempts("Too many attempts", account_id=account_id)
                raise InvalidCode("Invalid code", account_id=account_id, attempt_count=count)

            return self._consume(record)

    async def delete(self, account_id: str) -> bool:
        async with self._lock_for(account_id):
            return self._records.pop(account_id, None) is not None

    async def purge_expired(self, grace: timedelta = timedelta(0)) -> int:
        removed = 0
        for account_id in list(self._records):
            async with self._lock_for(account_id):
                record = self._records.get(account_id)
                if record is not None and self._clock() >= record.expires_at + grace:
                    del self._records[account_id]
                    removed += 1

        if removed:
            logger.debug("Expired OTP records purged", count=removed)
        return removed

    async def run_reaper(
        self,
        interval_seconds: float = 60.0,
        grace: timedelta = timedelta(minutes=5),
    ) -> None:
        """
        Periodically purge long-expired records until cancelled.

        Usage:
            task = asyncio.create_task(store.run_reaper())
        """
        while True:
            await asyncio.sleep(interval_seconds)
            await self.purge_expired(grace)
