from fastapi import APIRouter, Depends, Query, Response, status as http_status
from typing import Optional
from autoapply.api.deps import get_user_session
from autoapply.errors import NotFoundError
from autoapply.schemas import (
    JobApplication,
    JobApplicationCreate,
    JobApplicationUpdate,
    JobStatus,
    StatusMove,
    BoardColumn,
    BoardResponse,
    ScoreApplicationRequest,
)
from autoapply.services.documents import GeneratedDocumentCache, get_document_cache
from autoapply.services.session import UserSession

router = APIRouter()


@router.get("", response_model=list[JobApplication])
async def list_applications(
    status: Optional[JobStatus] = Query(None),
    session: UserSession = Depends(get_user_session),
):
    if status is None:
        return list(session.applications.records)
    return session.applications.list_by_status(status)


@router.get("/board", response_model=BoardResponse)
async def get_board(session: UserSession = Depends(get_user_session)):
    board = session.applications.board()
    return BoardResponse(
        columns=[BoardColumn(status=column, applications=apps) for column, apps in board.items()]
    )


@router.post("", response_model=JobApplication, status_code=http_status.HTTP_201_CREATED)
async def create_application(
    fields: JobApplicationCreate,
    session: UserSession = Depends(get_user_session),
):
    return await session.applications.create(fields)


@router.get("/{application_id}", response_model=JobApplication)
async def get_application(
    application_id: str,
    session: UserSession = Depends(get_user_session),
):
    application = session.applications.find_by_id(application_id)
    if application is None:
        raise NotFoundError("Job application not found")
    return application


@router.patch("/{application_id}", response_model=JobApplication)
async def update_application(
    application_id: str,
    update: JobApplicationUpdate,
    session: UserSession = Depends(get_user_session),
):
    return await session.applications.update(application_id, update)


@router.delete("/{application_id}", status_code=http_status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: str,
    session: UserSession = Depends(get_user_session),
    documents: GeneratedDocumentCache = Depends(get_document_cache),
):
    await session.applications.delete(application_id)
    await documents.discard(session.user.id, application_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


@router.post("/{application_id}/move", response_model=JobApplication)
async def move_application(
    application_id: str,
    move: StatusMove,
    session: UserSession = Depends(get_user_session),
):
    # Kanban drops land here as well; same rule as any programmatic move
    return await session.applications.move_status(application_id, move.status)


@router.post("/{application_id}/score", response_model=JobApplication)
async def score_application(
    application_id: str,
    request: ScoreApplicationRequest,
    session: UserSession = Depends(get_user_session),
):
    candidate_text = request.candidate_text
    if candidate_text is None:
        candidate_text = await session.profile.candidate_text()
    return await session.applications.score(application_id, candidate_text)
