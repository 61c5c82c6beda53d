"""
Authentication schemas
"""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request schema"""
    email: str = Field(..., description="Account e-mail")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"
