from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255, pattern=r"^\S+$")
    password: str = Field(..., min_length=1)


class AccountResponse(BaseModel):
    username: str
    role: str


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str
    role: str
