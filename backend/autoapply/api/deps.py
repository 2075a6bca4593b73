from typing import Optional
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from autoapply.auth import get_current_user
from autoapply.database import get_db
from autoapply.middleware.metrics import record_lifecycle_event
from autoapply.schemas import CurrentUser
from autoapply.services.session import UserSession
from autoapply.services.entitlement import EntitlementService


async def get_user_session(
    db: AsyncSession = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> UserSession:
    session = UserSession.for_database(user, db)
    session.applications.subscribe(record_lifecycle_event)
    return await session.begin()


def get_entitlement_service() -> EntitlementService:
    return EntitlementService()
