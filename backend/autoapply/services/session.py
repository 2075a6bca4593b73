"""
User Session - explicit per-session context for the core managers

Replaces app-wide ambient state: a session is built when a user session
begins (one per request in the HTTP layer), owns exactly one lifecycle
manager and one profile manager, and is discarded when it ends.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from autoapply.schemas import CurrentUser
from autoapply.services.lifecycle import ApplicationLifecycleManager
from autoapply.services.persistence import (
    JobApplicationStore,
    ProfileStore,
    SqlJobApplicationStore,
    SqlProfileStore,
)
from autoapply.services.profiles import CandidateProfileManager


class UserSession:
    def __init__(
        self,
        user: Optional[CurrentUser],
        applications_store: JobApplicationStore,
        profile_store: ProfileStore,
        timeout: Optional[float] = None,
    ):
        self.user = user
        self.applications = ApplicationLifecycleManager(applications_store, user, timeout=timeout)
        self.profile = CandidateProfileManager(profile_store, user, timeout=timeout)

    @classmethod
    def for_database(cls, user: Optional[CurrentUser], db: AsyncSession) -> "UserSession":
        return cls(user, SqlJobApplicationStore(db), SqlProfileStore(db))

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def begin(self) -> "UserSession":
        """Load the user's applications. Anonymous sessions start empty."""
        await self.applications.load()
        return self
