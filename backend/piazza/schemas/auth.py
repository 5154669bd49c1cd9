"""
Authentication schemas for email/password authentication.
"""
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class EmailRegisterRequest(BaseModel):
    """Request model for registration."""
    name: str = Field(..., min_length=1, description="User display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")

    @field_validator("name")
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class EmailLoginRequest(BaseModel):
    """Request model for email/password login."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class UserRead(BaseModel):
    """Schema for reading user details."""
    id: UUID
    name: Optional[str] = None
    email: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Response model for successful authentication."""
    message: str = Field(..., description="Outcome of the operation")
    token: str = Field(..., description="Bearer token for authenticated requests")
    user: UserRead
