"""
Shared fixtures: in-memory persistence fakes and signed-in users.
"""

import asyncio
from unittest.mock import AsyncMock
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from autoapply.schemas import CandidateProfile, CurrentUser, JobApplication
from autoapply.services.persistence import JobApplicationStore, ProfileStore


class InMemoryJobApplicationStore(JobApplicationStore):
    """
    Ownership-aware fake of the persistence capability.

    Set `error` to make every call raise it, or `delay` to make every call
    sleep first (for timeout tests). `delay_after_update` sleeps after an
    update has been applied, like a commit whose reply arrives late.
    """

    def __init__(self):
        self.rows: Dict[str, Tuple[str, JobApplication]] = {}
        self.error: Optional[Exception] = None
        self.delay: float = 0.0
        self.delay_after_update: float = 0.0
        self.calls: List[str] = []

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def list(self, owner_id: str) -> List[JobApplication]:
        await self._enter("list")
        return [record for owner, record in self.rows.values() if owner == owner_id]

    async def insert(self, owner_id: str, record: JobApplication) -> JobApplication:
        await self._enter("insert")
        self.rows[record.id] = (owner_id, record)
        return record

    async def update(self, owner_id: str, record_id: str, fields: Dict[str, Any]) -> bool:
        await self._enter("update")
        owner, record = self.rows.get(record_id, (None, None))
        if owner != owner_id:
            return False
        self.rows[record_id] = (owner, record.model_copy(update=fields))
        if self.delay_after_update:
            await asyncio.sleep(self.delay_after_update)
        return True

    async def delete(self, owner_id: str, record_id: str) -> bool:
        await self._enter("delete")
        owner, _ = self.rows.get(record_id, (None, None))
        if owner != owner_id:
            return False
        del self.rows[record_id]
        return True

    async def exists(self, record_id: str) -> bool:
        await self._enter("exists")
        return record_id in self.rows

    def stored(self, record_id: str) -> JobApplication:
        return self.rows[record_id][1]


class InMemoryProfileStore(ProfileStore):
    def __init__(self):
        self.profiles: Dict[str, CandidateProfile] = {}
        self.saves = 0
        self.delay: float = 0.0

    async def get(self, owner_id: str) -> Optional[CandidateProfile]:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.profiles.get(owner_id)

    async def save(self, owner_id: str, profile: CandidateProfile) -> CandidateProfile:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.saves += 1
        self.profiles[owner_id] = profile
        return profile


class FakeClock:
    """Returns a strictly increasing timestamp on each call."""

    def __init__(self):
        self.start = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return self.start + timedelta(minutes=self.calls)


@pytest.fixture
def alice():
    return CurrentUser(id="user-alice", email="alice@example.com", display_name="Alice")


@pytest.fixture
def bob():
    return CurrentUser(id="user-bob", email="bob@example.com", display_name="Bob")


@pytest.fixture
def job_store():
    return InMemoryJobApplicationStore()


@pytest.fixture
def profile_store():
    return InMemoryProfileStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_redis():
    """Create a mock Redis client backed by a dict."""
    data = {}
    redis = AsyncMock()

    async def _get(key):
        return data.get(key)

    async def _setex(key, ttl, value):
        data[key] = value
        return True

    async def _delete(*keys):
        return sum(1 for key in keys if data.pop(key, None) is not None)

    redis.get = AsyncMock(side_effect=_get)
    redis.setex = AsyncMock(side_effect=_setex)
    redis.delete = AsyncMock(side_effect=_delete)
    redis.close = AsyncMock()
    redis.data = data
    return redis
