from fastapi import APIRouter, Depends, Response, status as http_status
from autoapply.api.deps import get_user_session
from autoapply.schemas import (
    ProfileResponse,
    ProfileUpdate,
    Experience,
    ExperienceCreate,
    ExperienceUpdate,
    Education,
    EducationCreate,
    EducationUpdate,
    SkillRequest,
)
from autoapply.services.session import UserSession

router = APIRouter()


async def _profile_response(session: UserSession) -> ProfileResponse:
    profile = await session.profile.get()
    return ProfileResponse(**profile.model_dump(), completeness=await session.profile.completeness())


@router.get("", response_model=ProfileResponse)
async def get_profile(session: UserSession = Depends(get_user_session)):
    return await _profile_response(session)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    update: ProfileUpdate,
    session: UserSession = Depends(get_user_session),
):
    await session.profile.update_fields(update)
    return await _profile_response(session)


@router.post("/experiences", response_model=Experience, status_code=http_status.HTTP_201_CREATED)
async def add_experience(entry: ExperienceCreate, session: UserSession = Depends(get_user_session)):
    return await session.profile.add_experience(entry)


@router.patch("/experiences/{experience_id}", response_model=Experience)
async def update_experience(
    experience_id: str,
    update: ExperienceUpdate,
    session: UserSession = Depends(get_user_session),
):
    return await session.profile.update_experience(experience_id, update)


@router.delete("/experiences/{experience_id}", status_code=http_status.HTTP_204_NO_CONTENT)
async def remove_experience(experience_id: str, session: UserSession = Depends(get_user_session)):
    await session.profile.remove_experience(experience_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


@router.post("/education", response_model=Education, status_code=http_status.HTTP_201_CREATED)
async def add_education(entry: EducationCreate, session: UserSession = Depends(get_user_session)):
    return await session.profile.add_education(entry)


@router.patch("/education/{education_id}", response_model=Education)
async def update_education(
    education_id: str,
    update: EducationUpdate,
    session: UserSession = Depends(get_user_session),
):
    return await session.profile.update_education(education_id, update)


@router.delete("/education/{education_id}", status_code=http_status.HTTP_204_NO_CONTENT)
async def remove_education(education_id: str, session: UserSession = Depends(get_user_session)):
    await session.profile.remove_education(education_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


@router.post("/skills", response_model=list[str])
async def add_skill(request: SkillRequest, session: UserSession = Depends(get_user_session)):
    return await session.profile.add_skill(request.skill)


@router.delete("/skills/{skill:path}", response_model=list[str])
async def remove_skill(skill: str, session: UserSession = Depends(get_user_session)):
    return await session.profile.remove_skill(skill)
