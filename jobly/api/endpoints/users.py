"""
User management endpoints.

Listing and creating users is for admins; a user's own record can be read,
changed or deleted by that user or by an admin.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import TokenUser, get_admin_user, get_authorized_user
from jobly.core.exceptions import AppError
from jobly.core.security import create_access_token
from jobly.crud import user as user_crud
from jobly.schemas.user import (
    UserCreateRequest,
    UserUpdateRequest,
    UserEnvelope,
    UserDetailEnvelope,
    UserCreatedResponse,
    UserListEnvelope,
    UserDeletedResponse,
    ApplicationResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=UserCreatedResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """
    Add a user, possibly an admin. Admin only.

    This is not registration: it returns the new user plus a token for them.
    """
    user = user_crud.register(db, request.model_dump(by_alias=True))
    token = create_access_token(user["username"], user["isAdmin"])
    logger.info(f"Admin {admin.username} created user {user['username']}")
    return {"user": user, "token": token}


@router.get("/", response_model=UserListEnvelope)
def list_users(
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """List all users. Admin only."""
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", response_model=UserDetailEnvelope)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current: TokenUser = Depends(get_authorized_user),
):
    """Get a user and the jobs they applied to."""
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserEnvelope)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current: TokenUser = Depends(get_authorized_user),
):
    """
    Partially update a user.

    Fields can be: {firstName, lastName, password, email}
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"user": user_crud.update(db, username, data)}


@router.delete("/{username}", response_model=UserDeletedResponse)
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current: TokenUser = Depends(get_authorized_user),
):
    """Delete a user."""
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", response_model=ApplicationResponse)
def apply_to_job(
    username: str,
    job_id: int,
    db: Session = Depends(get_db),
    current: TokenUser = Depends(get_authorized_user),
):
    """Apply to a job as the given user."""
    try:
        user_crud.apply(db, username, job_id)
    except IntegrityError:
        # (username, job_id) is the primary key of applications
        db.rollback()
        raise AppError.bad_request("Can't apply to the same job twice")
    return {"applied": job_id}
