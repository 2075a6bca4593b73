from pydantic import BaseModel
from typing import Optional


class FitScoreRequest(BaseModel):
    job_text: str
    candidate_text: str


class FitScoreResponse(BaseModel):
    score: int


class AnalyzeRequest(BaseModel):
    job_text: str
    # Falls back to the signed-in user's profile text when omitted
    candidate_text: Optional[str] = None


class AnalyzeResponse(BaseModel):
    score: int
    band: str
    strengths: list[str]
    missing: list[str]


class ScoreApplicationRequest(BaseModel):
    candidate_text: Optional[str] = None
