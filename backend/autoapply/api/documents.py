from fastapi import APIRouter, Depends
from autoapply.api.deps import get_user_session
from autoapply.errors import AuthRequiredError, NotFoundError
from autoapply.middleware.metrics import record_document_lookup
from autoapply.schemas import DocumentKind, DocumentBody, DocumentResponse
from autoapply.services.documents import GeneratedDocumentCache, get_document_cache
from autoapply.services.session import UserSession

router = APIRouter()


def _owned_application_id(session: UserSession, application_id: str) -> str:
    if session.user is None:
        raise AuthRequiredError()
    if session.applications.find_by_id(application_id) is None:
        raise NotFoundError("Job application not found")
    return application_id


@router.get("/{application_id}/{kind}", response_model=DocumentResponse)
async def get_document(
    application_id: str,
    kind: DocumentKind,
    session: UserSession = Depends(get_user_session),
    documents: GeneratedDocumentCache = Depends(get_document_cache),
):
    _owned_application_id(session, application_id)
    content = await documents.get(session.user.id, application_id, kind)
    record_document_lookup(content is not None)
    if content is None:
        raise NotFoundError("No saved document for this application")
    return DocumentResponse(application_id=application_id, kind=kind, content=content)


@router.put("/{application_id}/{kind}", response_model=DocumentResponse)
async def save_document(
    application_id: str,
    kind: DocumentKind,
    body: DocumentBody,
    session: UserSession = Depends(get_user_session),
    documents: GeneratedDocumentCache = Depends(get_document_cache),
):
    _owned_application_id(session, application_id)
    await documents.save(session.user.id, application_id, kind, body.content)
    return DocumentResponse(application_id=application_id, kind=kind, content=body.content)
