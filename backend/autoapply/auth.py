from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Request
from jose import JWTError, jwt
from autoapply.config import get_settings
from autoapply.errors import AuthRequiredError
from autoapply.schemas import CurrentUser

ALGORITHM = "HS256"
COOKIE_NAME = "session_token"


def create_session_token(user: CurrentUser) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(days=settings.session_expire_days)
    to_encode = {"exp": expire, "sub": user.id, "email": user.email, "name": user.display_name}
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def verify_session_token(token: str) -> Optional[CurrentUser]:
    try:
        payload = jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    if not payload.get("sub"):
        return None
    return CurrentUser(id=payload["sub"], email=payload.get("email", ""), display_name=payload.get("name", ""))


def _token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):]
    return request.cookies.get(COOKIE_NAME)


async def get_current_user(request: Request) -> Optional[CurrentUser]:
    """Signed-in user, or None when the request carries no valid session."""
    token = _token_from_request(request)
    if not token:
        return None
    return verify_session_token(token)


async def require_user(request: Request) -> CurrentUser:
    user = await get_current_user(request)
    if user is None:
        raise AuthRequiredError()
    return user
