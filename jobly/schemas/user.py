"""
Pydantic schemas for users, registration and login.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration. New users are never admins."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: EmailStr

    class Config:
        populate_by_name = True
        extra = "forbid"


class UserCreateRequest(UserRegisterRequest):
    """Request schema for an admin adding a user, who may be an admin too."""
    is_admin: bool = Field(False, alias="isAdmin")


class UserUpdateRequest(BaseModel):
    """Request schema for a partial user update."""
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="lastName")
    email: Optional[EmailStr] = None

    class Config:
        populate_by_name = True
        extra = "forbid"


class UserLoginRequest(BaseModel):
    """Request schema for login."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str


class UserResponse(BaseModel):
    """User profile response (no password hash)."""
    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    is_admin: bool = Field(False, alias="isAdmin")

    class Config:
        populate_by_name = True


class UserDetailResponse(UserResponse):
    """User profile with the ids of jobs applied to."""
    jobs: List[int] = []


class UserEnvelope(BaseModel):
    user: UserResponse


class UserDetailEnvelope(BaseModel):
    user: UserDetailResponse


class UserCreatedResponse(BaseModel):
    user: UserResponse
    token: str


class UserListEnvelope(BaseModel):
    users: List[UserDetailResponse]


class UserDeletedResponse(BaseModel):
    deleted: str


class ApplicationResponse(BaseModel):
    applied: int
