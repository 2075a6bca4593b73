from pydantic import BaseModel


class SignUpRequest(BaseModel):
    email: str
    password: str
    display_name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    success: bool
    message: str


class CurrentUser(BaseModel):
    id: str
    email: str
    display_name: str = ""
