"""
Mapping store strategies using Strategy Pattern.

The store is the single source of truth for short code -> URL mappings and
for the visit counter. Two backends:
- SQLAlchemy: durable, any database SQLAlchemy speaks (SQLite, PostgreSQL)
- In-memory: development and tests, lost on restart
"""

import asyncio
import logging
from functools import partial
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import anyio
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shortlink_app.errors import DependencyError, DuplicateShortCodeError
from shortlink_app.models.url import UrlMapping, utcnow
from shortlink_app.schemas.url import UrlMappingRecord

logger = logging.getLogger(__name__)


class MappingStore(ABC):
    """
    Abstract base class for mapping stores.

    Contract the resolver depends on:
    - short_code uniqueness is enforced by the store (insert raises
      DuplicateShortCodeError)
    - find_and_increment and increment are atomic read-modify-writes,
      so concurrent redirects never lose a visit
    - failures and timeouts surface as DependencyError
    """

    @abstractmethod
    async def insert(self, original_url: str, short_code: str) -> UrlMappingRecord:
        """
        Persist a new mapping with visits=0.

        Raises:
            DuplicateShortCodeError: short_code is already taken
        """
        pass

    @abstractmethod
    async def find_and_increment(self, short_code: str) -> Optional[UrlMappingRecord]:
        """
        Atomically bump visits and updated_at, returning the updated mapping.

        Returns None (and changes nothing) if the code does not exist.
        """
        pass

    @abstractmethod
    async def increment(self, short_code: str) -> bool:
        """Atomically bump visits and updated_at. False if the code does not exist."""
        pass

    @abstractmethod
    async def get(self, short_code: str) -> Optional[UrlMappingRecord]:
        """Read a mapping without touching the counter"""
        pass

    @abstractmethod
    async def delete(self, short_code: str) -> int:
        """Delete one mapping, returning the number of rows removed (0 or 1)"""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every mapping, returning the number of rows removed"""
        pass

    @abstractmethod
    async def list(self) -> List[UrlMappingRecord]:
        """All mappings, newest first"""
        pass


class SQLAlchemyMappingStore(MappingStore):
    """
    SQLAlchemy-backed mapping store.

    Each call opens its own session and runs in the thread pool, bounded by
    `timeout` seconds. A timed-out call is reported as DependencyError; the
    worker thread may still finish, which can only over-count visits, never
    under-count them.
    """

    def __init__(self, session_factory: Callable[[], Session], timeout: float = 5.0):
        """
        Args:
            session_factory: sessionmaker bound to the target engine
            timeout: Seconds to wait for a single store call
        """
        self.session_factory = session_factory
        self.timeout = timeout

    async def _run(self, fn, *args):
        try:
            # abandon_on_cancel lets wait_for give up on a stuck worker thread
            call = partial(anyio.to_thread.run_sync, fn, *args, abandon_on_cancel=True)
            return await asyncio.wait_for(call(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Mapping store call %s timed out after %ss", fn.__name__, self.timeout)
            raise DependencyError() from exc
        except SQLAlchemyError as exc:
            logger.exception("Mapping store call %s failed", fn.__name__)
            raise DependencyError() from exc

    # Sync implementations (run in worker threads)

    def _insert(self, original_url: str, short_code: str) -> UrlMappingRecord:
        now = utcnow()
        with self.session_factory() as db:
            mapping = UrlMapping(
                original_url=original_url,
                short_code=short_code,
                visits=0,
                created_at=now,
                updated_at=now,
            )
            db.add(mapping)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise DuplicateShortCodeError(short_code)
            return UrlMappingRecord.model_validate(mapping)

    def _bump(self, db: Session, short_code: str) -> bool:
        result = db.execute(
            update(UrlMapping)
            .where(UrlMapping.short_code == short_code)
            .values(visits=UrlMapping.visits + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def _find_and_increment(self, short_code: str) -> Optional[UrlMappingRecord]:
        with self.session_factory() as db:
            if not self._bump(db, short_code):
                db.rollback()
                return None
            # Same transaction: the row is still locked by our UPDATE
            mapping = db.execute(
                select(UrlMapping).where(UrlMapping.short_code == short_code)
            ).scalar_one()
            record = UrlMappingRecord.model_validate(mapping)
            db.commit()
            return record

    def _increment(self, short_code: str) -> bool:
        with self.session_factory() as db:
            found = self._bump(db, short_code)
            db.commit()
            return found

    def _get(self, short_code: str) -> Optional[UrlMappingRecord]:
        with self.session_factory() as db:
            mapping = db.execute(
                select(UrlMapping).where(UrlMapping.short_code == short_code)
            ).scalar_one_or_none()
            return UrlMappingRecord.model_validate(mapping) if mapping else None

    def _delete(self, short_code: str) -> int:
        with self.session_factory() as db:
            result = db.execute(delete(UrlMapping).where(UrlMapping.short_code == short_code))
            db.commit()
            return result.rowcount

    def _delete_all(self) -> int:
        with self.session_factory() as db:
            result = db.execute(delete(UrlMapping))
            db.commit()
            return result.rowcount

    def _list(self) -> List[UrlMappingRecord]:
        with self.session_factory() as db:
            rows = db.execute(
                select(UrlMapping).order_by(UrlMapping.created_at.desc(), UrlMapping.id.desc())
            ).scalars().all()
            return [UrlMappingRecord.model_validate(row) for row in rows]

    # Async interface

    async def insert(self, original_url: str, short_code: str) -> UrlMappingRecord:
        return await self._run(self._insert, original_url, short_code)

    async def find_and_increment(self, short_code: str) -> Optional[UrlMappingRecord]:
        return await self._run(self._find_and_increment, short_code)

    async def increment(self, short_code: str) -> bool:
        return await self._run(self._increment, short_code)

    async def get(self, short_code: str) -> Optional[UrlMappingRecord]:
        return await self._run(self._get, short_code)

    async def delete(self, short_code: str) -> int:
        return await self._run(self._delete, short_code)

    async def delete_all(self) -> int:
        return await self._run(self._delete_all)

    async def list(self) -> List[UrlMappingRecord]:
        return await self._run(self._list)


class InMemoryMappingStore(MappingStore):
    """
    Dict-backed mapping store.

    Every operation holds an asyncio.Lock, so read-modify-writes stay atomic
    with respect to other coroutines on the same event loop.
    Not shared between processes; lost on restart.
    """

    def __init__(self):
        self._mappings: Dict[str, UrlMappingRecord] = {}
        self._lock = asyncio.Lock()

    async def insert(self, original_url: str, short_code: str) -> UrlMappingRecord:
        async with self._lock:
            if short_code in self._mappings:
                raise DuplicateShortCodeError(short_code)
            now = utcnow()
            record = UrlMappingRecord(
                original_url=original_url,
                short_code=short_code,
                visits=0,
                created_at=now,
                updated_at=now,
            )
            self._mappings[short_code] = record
            return record.model_copy()

    def _bump(self, short_code: str) -> Optional[UrlMappingRecord]:
        record = self._mappings.get(short_code)
        if record is None:
            return None
        record.visits += 1
        record.updated_at = utcnow()
        return record

    async def find_and_increment(self, short_code: str) -> Optional[UrlMappingRecord]:
        async with self._lock:
            record = self._bump(short_code)
            return record.model_copy() if record else None

    async def increment(self, short_code: str) -> bool:
        async with self._lock:
            return self._bump(short_code) is not None

    async def get(self, short_code: str) -> Optional[UrlMappingRecord]:
        async with self._lock:
            record = self._mappings.get(short_code)
            return record.model_copy() if record else None

    async def delete(self, short_code: str) -> int:
        async with self._lock:
            return 1 if self._mappings.pop(short_code, None) is not None else 0

    async def delete_all(self) -> int:
        async with self._lock:
            count = len(self._mappings)
            self._mappings.clear()
            return count

    async def list(self) -> List[UrlMappingRecord]:
        async with self._lock:
            # dicts keep insertion order, so reversed() is newest first
            return [record.model_copy() for record in reversed(self._mappings.values())]
