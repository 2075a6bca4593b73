"""
Candidate Profile Manager - resume data behind generated documents and scoring

One profile per account, created empty on first access. Experiences and
education keep insertion order; skills are an ordered list deduplicated on
exact (case-sensitive) match.
"""

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Dict, List, Optional

from autoapply.config import get_settings
from autoapply.errors import AuthRequiredError, NotFoundError, PersistenceError, ValidationError
from autoapply.schemas import (
    CandidateProfile,
    CurrentUser,
    Education,
    EducationCreate,
    EducationUpdate,
    Experience,
    ExperienceCreate,
    ExperienceUpdate,
    ProfileUpdate,
)
from autoapply.services.persistence import ProfileStore

logger = logging.getLogger(__name__)

SCALAR_FIELDS = ("name", "email", "phone", "location", "title", "summary")


class CandidateProfileManager:
    def __init__(self, store: ProfileStore, owner: Optional[CurrentUser], timeout: Optional[float] = None):
        self.store = store
        self.owner = owner
        self.timeout = timeout if timeout is not None else get_settings().persistence_timeout_seconds
        self._profile: Optional[CandidateProfile] = None

    def _require_owner(self) -> CurrentUser:
        if self.owner is None:
            raise AuthRequiredError("Sign in to edit your profile")
        return self.owner

    async def _call(self, operation: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise PersistenceError(f"Profile storage did not respond within {self.timeout}s") from e

    async def get(self) -> CandidateProfile:
        """Return the profile, creating an empty one on first access."""
        if self._profile is not None:
            return self._profile
        if self.owner is None:
            return CandidateProfile()

        profile = await self._call(self.store.get(self.owner.id))
        if profile is None:
            profile = await self._call(
                self.store.save(self.owner.id, CandidateProfile(email=self.owner.email))
            )
            logger.info(f"Created empty profile for {self.owner.id}")
        self._profile = profile
        return profile

    async def _save(self, profile: CandidateProfile) -> CandidateProfile:
        owner = self._require_owner()
        self._profile = await self._call(self.store.save(owner.id, profile))
        return self._profile

    # ==================== Scalars ====================

    async def update_fields(self, changes: ProfileUpdate) -> CandidateProfile:
        self._require_owner()
        profile = await self.get()
        fields = {k: v for k, v in changes.model_dump(exclude_unset=True).items() if v is not None}
        return await self._save(profile.model_copy(update=fields))

    # ==================== Experiences ====================

    async def add_experience(self, entry: ExperienceCreate) -> Experience:
        self._require_owner()
        profile = await self.get()
        experience = Experience(id=str(uuid.uuid4()), **entry.model_dump())
        await self._save(profile.model_copy(update={"experiences": [*profile.experiences, experience]}))
        return experience

    async def update_experience(self, experience_id: str, changes: ExperienceUpdate) -> Experience:
        self._require_owner()
        profile = await self.get()
        updated = _merge_entry(profile.experiences, experience_id, changes.model_dump(exclude_unset=True))
        if updated is None:
            raise NotFoundError(f"Experience {experience_id} not found")

        experiences = [updated if e.id == experience_id else e for e in profile.experiences]
        await self._save(profile.model_copy(update={"experiences": experiences}))
        return updated

    async def remove_experience(self, experience_id: str) -> None:
        self._require_owner()
        profile = await self.get()
        experiences = [e for e in profile.experiences if e.id != experience_id]
        if len(experiences) == len(profile.experiences):
            raise NotFoundError(f"Experience {experience_id} not found")
        await self._save(profile.model_copy(update={"experiences": experiences}))

    # ==================== Education ====================

    async def add_education(self, entry: EducationCreate) -> Education:
        self._require_owner()
        profile = await self.get()
        education = Education(id=str(uuid.uuid4()), **entry.model_dump())
        await self._save(profile.model_copy(update={"education": [*profile.education, education]}))
        return education

    async def update_education(self, education_id: str, changes: EducationUpdate) -> Education:
        self._require_owner()
        profile = await self.get()
        updated = _merge_entry(profile.education, education_id, changes.model_dump(exclude_unset=True))
        if updated is None:
            raise NotFoundError(f"Education {education_id} not found")

        education = [updated if e.id == education_id else e for e in profile.education]
        await self._save(profile.model_copy(update={"education": education}))
        return updated

    async def remove_education(self, education_id: str) -> None:
        self._require_owner()
        profile = await self.get()
        education = [e for e in profile.education if e.id != education_id]
        if len(education) == len(profile.education):
            raise NotFoundError(f"Education {education_id} not found")
        await self._save(profile.model_copy(update={"education": education}))

    # ==================== Skills ====================

    async def add_skill(self, skill: str) -> List[str]:
        """Append a skill. Already present (exact match) is a silent no-op."""
        self._require_owner()
        if not skill.strip():
            raise ValidationError("Skill cannot be blank")

        profile = await self.get()
        if skill in profile.skills:
            return list(profile.skills)

        profile = await self._save(profile.model_copy(update={"skills": [*profile.skills, skill]}))
        return list(profile.skills)

    async def remove_skill(self, skill: str) -> List[str]:
        self._require_owner()
        profile = await self.get()
        if skill not in profile.skills:
            return list(profile.skills)

        profile = await self._save(
            profile.model_copy(update={"skills": [s for s in profile.skills if s != skill]})
        )
        return list(profile.skills)

    # ==================== Derived views ====================

    async def completeness(self) -> int:
        """Percentage of the six contact/summary fields that are filled in."""
        profile = await self.get()
        filled = sum(1 for field in SCALAR_FIELDS if getattr(profile, field))
        return round(filled / len(SCALAR_FIELDS) * 100)

    async def candidate_text(self) -> str:
        """Read-only text rendering of the profile, fed to the fit score."""
        return render_candidate_text(await self.get())


def _merge_entry(entries: List[Any], entry_id: str, changes: Dict[str, Any]):
    for entry in entries:
        if entry.id == entry_id:
            return entry.model_copy(update={k: v for k, v in changes.items() if v is not None})
    return None


def render_candidate_text(profile: CandidateProfile) -> str:
    parts = [profile.title, profile.summary, " ".join(profile.skills)]
    for experience in profile.experiences:
        parts.extend([experience.title, experience.company, experience.description])
    for education in profile.education:
        parts.extend([education.degree, education.field, education.institution])
    return "\n".join(part for part in parts if part)
