"""
Profile Model - candidate resume data, one row per user

Scalar contact/summary fields plus ordered JSON lists for experiences,
education and skills. List order is insertion order and is preserved
verbatim; generated documents rely on it.
"""

from sqlalchemy import Column, String, Text, JSON, DateTime, ForeignKey
from sqlalchemy.sql import func
from autoapply.database import Base


class ProfileRow(Base):
    __tablename__ = "profiles"

    user_id = Column(String, ForeignKey("users.id"), primary_key=True)
    name = Column(String(200), nullable=False, default="")
    email = Column(String(320), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    title = Column(String(200), nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    experiences = Column(JSON, nullable=False, default=list)
    education = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
