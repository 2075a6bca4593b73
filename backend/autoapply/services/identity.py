"""
Identity Service - account sign-up and sign-in over the users table

Passwords are stored as salted PBKDF2-SHA256 digests:
    pbkdf2_sha256${iterations}${salt_hex}${digest_hex}
"""

import hashlib
import hmac
import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from autoapply.errors import PersistenceError, ValidationError
from autoapply.models import User
from autoapply.schemas import CurrentUser

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 260_000
MIN_PASSWORD_LENGTH = 8


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        _, iterations, salt_hex, digest_hex = stored.split("$")
        digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


def _to_current_user(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, email=user.email, display_name=user.display_name)


class IdentityService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def sign_up(self, email: str, password: str, display_name: str = "") -> CurrentUser:
        email = email.strip().lower()
        if "@" not in email:
            raise ValidationError("A valid email address is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = User(email=email, display_name=display_name.strip(), password_hash=hash_password(password))
        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            raise ValidationError("An account with this email already exists") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError("Could not create account") from e

        logger.info(f"Created account {user.id}")
        return _to_current_user(user)

    async def authenticate(self, email: str, password: str) -> Optional[CurrentUser]:
        """The matching user, or None when the email / password pair is wrong."""
        try:
            result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        except SQLAlchemyError as e:
            raise PersistenceError("Could not verify credentials") from e

        user = result.scalar_one_or_none()
        if user is None or not verify_password(password, user.password_hash):
            return None
        return _to_current_user(user)
