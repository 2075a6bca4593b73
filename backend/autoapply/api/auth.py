from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from autoapply.auth import create_session_token, require_user, COOKIE_NAME
from autoapply.config import get_settings
from autoapply.database import get_db
from autoapply.errors import AuthRequiredError
from autoapply.schemas import SignUpRequest, LoginRequest, LoginResponse, CurrentUser
from autoapply.services.identity import IdentityService

router = APIRouter()


def _set_session_cookie(response: Response, user: CurrentUser) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=create_session_token(user),
        httponly=True,
        max_age=get_settings().session_expire_days * 24 * 60 * 60,
        samesite="lax",
    )


@router.post("/signup", response_model=CurrentUser, status_code=201)
async def signup(request: SignUpRequest, response: Response, db: AsyncSession = Depends(get_db)):
    user = await IdentityService(db).sign_up(request.email, request.password, request.display_name)
    _set_session_cookie(response, user)
    return user


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    user = await IdentityService(db).authenticate(request.email, request.password)
    if user is None:
        raise AuthRequiredError("Invalid email or password")

    _set_session_cookie(response, user)
    return LoginResponse(success=True, message="Logged in successfully")


@router.post("/logout", response_model=LoginResponse)
async def logout(response: Response):
    response.delete_cookie(COOKIE_NAME)
    return LoginResponse(success=True, message="Logged out successfully")


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(require_user)):
    return user
