from autoapply.schemas.job_application import (
    JobStatus,
    BOARD_COLUMNS,
    SUBMITTED_STATUSES,
    JobApplication,
    JobApplicationCreate,
    JobApplicationUpdate,
    StatusMove,
    BoardColumn,
    BoardResponse,
    ApplicationStats,
)
from autoapply.schemas.profile import (
    CandidateProfile,
    ProfileUpdate,
    ProfileResponse,
    Experience,
    ExperienceCreate,
    ExperienceUpdate,
    Education,
    EducationCreate,
    EducationUpdate,
    SkillRequest,
)
from autoapply.schemas.auth import SignUpRequest, LoginRequest, LoginResponse, CurrentUser
from autoapply.schemas.analyzer import (
    FitScoreRequest,
    FitScoreResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    ScoreApplicationRequest,
)
from autoapply.schemas.documents import DocumentKind, DocumentBody, DocumentResponse
from autoapply.schemas.billing import Entitlement, CheckoutResponse

__all__ = [
    "JobStatus",
    "BOARD_COLUMNS",
    "SUBMITTED_STATUSES",
    "JobApplication",
    "JobApplicationCreate",
    "JobApplicationUpdate",
    "StatusMove",
    "BoardColumn",
    "BoardResponse",
    "ApplicationStats",
    "CandidateProfile",
    "ProfileUpdate",
    "ProfileResponse",
    "Experience",
    "ExperienceCreate",
    "ExperienceUpdate",
    "Education",
    "EducationCreate",
    "EducationUpdate",
    "SkillRequest",
    "SignUpRequest",
    "LoginRequest",
    "LoginResponse",
    "CurrentUser",
    "FitScoreRequest",
    "FitScoreResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ScoreApplicationRequest",
    "DocumentKind",
    "DocumentBody",
    "DocumentResponse",
    "Entitlement",
    "CheckoutResponse",
]
