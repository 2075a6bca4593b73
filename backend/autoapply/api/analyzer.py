from fastapi import APIRouter, Depends
from autoapply.api.deps import get_user_session
from autoapply.errors import ValidationError
from autoapply.schemas import FitScoreRequest, FitScoreResponse, AnalyzeRequest, AnalyzeResponse
from autoapply.services.fit_score import compute_fit_score, analyze_keywords
from autoapply.services.session import UserSession

router = APIRouter()


@router.post("/fit-score", response_model=FitScoreResponse)
async def fit_score(request: FitScoreRequest):
    return FitScoreResponse(score=compute_fit_score(request.job_text, request.candidate_text))


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    session: UserSession = Depends(get_user_session),
):
    if not request.job_text.strip():
        raise ValidationError("Please enter a job description to analyze")

    candidate_text = request.candidate_text or ""
    if not candidate_text.strip():
        profile = await session.profile.get()
        if not profile.experiences:
            raise ValidationError("Complete your profile or paste a resume to analyze job fit")
        candidate_text = await session.profile.candidate_text()

    return AnalyzeResponse(**analyze_keywords(request.job_text, candidate_text))
