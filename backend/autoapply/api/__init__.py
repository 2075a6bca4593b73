from fastapi import APIRouter
from autoapply.api import auth, applications, profile, analyzer, documents, billing, stats

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(applications.router, prefix="/applications", tags=["applications"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(analyzer.router, prefix="/analyzer", tags=["analyzer"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
