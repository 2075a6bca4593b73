"""
User Model - account identity for ownership scoping

Every job application and profile row carries the owning user's id;
all reads and writes are filtered on it.
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from autoapply.database import Base
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(320), nullable=False, unique=True, index=True)
    display_name = Column(String(200), nullable=False, default="")
    password_hash = Column(String(256), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
