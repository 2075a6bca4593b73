from enum import Enum
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional


class JobStatus(str, Enum):
    TO_APPLY = "To Apply"
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"


# Display order of the kanban board
BOARD_COLUMNS = [
    JobStatus.TO_APPLY,
    JobStatus.APPLIED,
    JobStatus.INTERVIEW,
    JobStatus.OFFER,
    JobStatus.REJECTED,
]

# Statuses that imply an application was already submitted
SUBMITTED_STATUSES = frozenset({JobStatus.APPLIED, JobStatus.INTERVIEW, JobStatus.OFFER})


class JobApplicationBase(BaseModel):
    title: str
    company: str
    location: str = ""
    description: str = ""
    url: str = ""
    notes: str = ""
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    salary: Optional[str] = None


class JobApplicationCreate(JobApplicationBase):
    pass


class JobApplicationUpdate(BaseModel):
    """Partial edit. id, date_added and date_applied are not editable."""

    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    salary: Optional[str] = None
    status: Optional[JobStatus] = None
    fit_score: Optional[int] = Field(None, ge=0, le=100)


class JobApplication(JobApplicationBase):
    id: str
    status: JobStatus = JobStatus.TO_APPLY
    date_added: datetime
    date_applied: Optional[datetime] = None
    fit_score: Optional[int] = Field(None, ge=0, le=100)

    class Config:
        from_attributes = True

    @field_validator("date_added", "date_applied")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive timestamps; they were written as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class StatusMove(BaseModel):
    status: JobStatus


class BoardColumn(BaseModel):
    status: JobStatus
    applications: list[JobApplication]


class BoardResponse(BaseModel):
    columns: list[BoardColumn]


class ApplicationStats(BaseModel):
    total: int
    applied: int
    interviewing: int
    by_status: dict[str, int]
    avg_fit_score: Optional[float] = None
