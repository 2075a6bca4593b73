from fastapi import APIRouter, Depends
from autoapply.api.deps import get_user_session
from autoapply.services.session import UserSession

router = APIRouter()


@router.get("")
async def get_stats(session: UserSession = Depends(get_user_session)):
    stats = session.applications.stats()
    return {
        **stats.model_dump(),
        "profile_completeness": await session.profile.completeness(),
    }
