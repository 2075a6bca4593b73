"""
Job Application Model - SQLAlchemy ORM model for tracked opportunities

Storage shape of a JobApplication record. The in-memory record
(autoapply.schemas.JobApplication) is mapped to and from these columns by
SqlJobApplicationStore; nothing else touches this table.

Status Flow (board order, any transition allowed):
    To Apply → Applied → Interview → Offer, Rejected from anywhere
"""

from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from autoapply.database import Base
import uuid


class JobApplicationRow(Base):
    """
    Tracked job application owned by exactly one user.

    Attributes:
        id: UUID primary key, assigned at insert
        user_id: Owning account (indexed, every query filters on it)
        status: Board column (indexed)
        date_added: Set at insert, never updated
        date_applied: Stamped the first time the record moves into Applied
        fit_score: Keyword-overlap score 0-100, null until computed
    """

    __tablename__ = "job_applications"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    company = Column(String(500), nullable=False)
    location = Column(String(500), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    url = Column(String(2000), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    contact_name = Column(String(200), nullable=True)
    contact_email = Column(String(320), nullable=True)
    salary = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="To Apply", index=True)
    date_added = Column(DateTime(timezone=True), nullable=False)
    date_applied = Column(DateTime(timezone=True), nullable=True)
    fit_score = Column(Integer, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
