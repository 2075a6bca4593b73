"""
Persistence Capability - storage adapters behind the core managers

The lifecycle and profile managers only talk to the abstract stores below.
Every method is scoped by owner id; no statement is ever issued without a
user_id filter, so one account can never read or mutate another's rows.

Adapters:
    SqlJobApplicationStore  job_applications table (async SQLAlchemy)
    SqlProfileStore         profiles table, lists stored as JSON

Field mapping between the in-memory records (autoapply.schemas) and the
storage columns lives here and nowhere else. Library failures are
translated to PersistenceError; retry policy, if any, belongs here too.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update as sa_update, delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from autoapply.errors import PersistenceError
from autoapply.models import JobApplicationRow, ProfileRow
from autoapply.schemas import CandidateProfile, JobApplication

logger = logging.getLogger(__name__)


class JobApplicationStore(ABC):
    """Durable storage for JobApplication records, keyed by (owner, id)."""

    @abstractmethod
    async def list(self, owner_id: str) -> List[JobApplication]:
        """Return the owner's records in insertion order."""

    @abstractmethod
    async def insert(self, owner_id: str, record: JobApplication) -> JobApplication:
        """Store a new record and return it as stored."""

    @abstractmethod
    async def update(self, owner_id: str, record_id: str, fields: Dict[str, Any]) -> bool:
        """Apply a partial update. False when no owned record matched."""

    @abstractmethod
    async def delete(self, owner_id: str, record_id: str) -> bool:
        """Remove an owned record. False when no owned record matched."""

    @abstractmethod
    async def exists(self, record_id: str) -> bool:
        """Whether any owner holds a record with this id."""


class ProfileStore(ABC):
    """Durable storage for one CandidateProfile per owner."""

    @abstractmethod
    async def get(self, owner_id: str) -> Optional[CandidateProfile]:
        pass

    @abstractmethod
    async def save(self, owner_id: str, profile: CandidateProfile) -> CandidateProfile:
        pass


def _to_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    # Enums are stored by value
    return {key: getattr(value, "value", value) for key, value in fields.items()}


class SqlJobApplicationStore(JobApplicationStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, owner_id: str) -> List[JobApplication]:
        query = (
            select(JobApplicationRow)
            .where(JobApplicationRow.user_id == owner_id)
            .order_by(JobApplicationRow.date_added.asc(), JobApplicationRow.id.asc())
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list applications for {owner_id}: {e}")
            raise PersistenceError("Could not load job applications") from e

        return [JobApplication.model_validate(row) for row in result.scalars().all()]

    async def insert(self, owner_id: str, record: JobApplication) -> JobApplication:
        row = JobApplicationRow(user_id=owner_id, **_to_columns(record.model_dump()))
        try:
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to insert application for {owner_id}: {e}")
            raise PersistenceError("Could not save job application") from e

        return JobApplication.model_validate(row)

    async def update(self, owner_id: str, record_id: str, fields: Dict[str, Any]) -> bool:
        stmt = (
            sa_update(JobApplicationRow)
            .where(JobApplicationRow.id == record_id, JobApplicationRow.user_id == owner_id)
            .values(**_to_columns(fields))
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update application {record_id}: {e}")
            raise PersistenceError("Could not update job application") from e

        return result.rowcount > 0

    async def delete(self, owner_id: str, record_id: str) -> bool:
        stmt = sa_delete(JobApplicationRow).where(
            JobApplicationRow.id == record_id, JobApplicationRow.user_id == owner_id
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete application {record_id}: {e}")
            raise PersistenceError("Could not delete job application") from e

        return result.rowcount > 0

    async def exists(self, record_id: str) -> bool:
        try:
            result = await self.db.execute(
                select(JobApplicationRow.id).where(JobApplicationRow.id == record_id)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Could not look up job application") from e

        return result.scalar_one_or_none() is not None


class SqlProfileStore(ProfileStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, owner_id: str) -> Optional[CandidateProfile]:
        try:
            result = await self.db.execute(select(ProfileRow).where(ProfileRow.user_id == owner_id))
        except SQLAlchemyError as e:
            logger.error(f"Failed to load profile for {owner_id}: {e}")
            raise PersistenceError("Could not load profile") from e

        row = result.scalar_one_or_none()
        if row is None:
            return None
        return CandidateProfile.model_validate(row)

    async def save(self, owner_id: str, profile: CandidateProfile) -> CandidateProfile:
        data = profile.model_dump()
        try:
            row = await self.db.get(ProfileRow, owner_id)
            if row is None:
                row = ProfileRow(user_id=owner_id)
                self.db.add(row)
            for field, value in data.items():
                setattr(row, field, value)
            await self.db.commit()
            await self.db.refresh(row)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to save profile for {owner_id}: {e}")
            raise PersistenceError("Could not save profile") from e

        return CandidateProfile.model_validate(row)
