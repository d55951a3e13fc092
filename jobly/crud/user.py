"""
CRUD operations for users and their job applications.
"""

import logging
from typing import Any, Dict, List, Mapping
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import AppError
from jobly.core.security import get_password_hash, verify_password
from jobly.core.sql import reject_nulls, sql_for_partial_update

logger = logging.getLogger(__name__)

USER_COLUMNS = ('username, first_name AS "firstName", last_name AS "lastName", '
                'email, is_admin AS "isAdmin"')

# API field name -> column, for fields spelled differently
FIELD_NAME_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

# Fields whose column is NOT NULL
REQUIRED_FIELDS = ("password", "firstName", "lastName", "email", "isAdmin")


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        AppError UNAUTHORIZED: Unknown user or wrong password
    """
    rows = execute(
        db,
        f"""SELECT {USER_COLUMNS}, password
            FROM users
            WHERE username = $1""",
        [username],
    )

    if rows:
        user = rows[0]
        hashed_password = user.pop("password")
        if verify_password(password, hashed_password):
            return user

    logger.info(f"Failed login for {username}")
    raise AppError.unauthorized("Invalid username/password")


def register(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Args:
        db: Database session
        data: {username, password, firstName, lastName, email, isAdmin}

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        AppError BAD_REQUEST: If the username is taken
    """
    username = data["username"]
    duplicate = execute(db, "SELECT username FROM users WHERE username = $1", [username])
    if duplicate:
        raise AppError.bad_request(f"Duplicate username: {username}")

    rows = execute(
        db,
        f"""INSERT INTO users
            (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {USER_COLUMNS}""",
        [
            username,
            get_password_hash(data["password"]),
            data["firstName"],
            data["lastName"],
            data["email"],
            bool(data.get("isAdmin", False)),
        ],
    )
    db.commit()

    logger.info(f"Registered user {username}")
    return rows[0]


def _applied_job_ids(db: Session, username: str) -> List[int]:
    rows = execute(
        db,
        """SELECT job_id
           FROM applications
           WHERE username = $1
           ORDER BY job_id""",
        [username],
    )
    return [row["job_id"] for row in rows]


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    List all users ordered by username, each with the ids of jobs applied to.

    Returns:
        [{username, firstName, lastName, email, isAdmin, jobs}, ...]
    """
    users = execute(
        db,
        f"""SELECT {USER_COLUMNS}
            FROM users
            ORDER BY username""",
    )
    applications = execute(
        db,
        """SELECT username, job_id
           FROM applications
           ORDER BY job_id""",
    )

    jobs_by_user: Dict[str, List[int]] = {}
    for row in applications:
        jobs_by_user.setdefault(row["username"], []).append(row["job_id"])

    for user in users:
        user["jobs"] = jobs_by_user.get(user["username"], [])
    return users


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Get a user with the ids of jobs applied to.

    Returns:
        {username, firstName, lastName, email, isAdmin, jobs}

    Raises:
        AppError NOT_FOUND: If no such user
    """
    rows = execute(
        db,
        f"""SELECT {USER_COLUMNS}
            FROM users
            WHERE username = $1""",
        [username],
    )
    if not rows:
        raise AppError.not_found(f"No user: {username}")

    user = rows[0]
    user["jobs"] = _applied_job_ids(db, username)
    return user


def update(db: Session, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user.

    Data can include {firstName, lastName, password, email, isAdmin}. A new
    password is hashed before it is stored.

    WARNING: this can set a password or grant admin. Callers must have
    authorized the change.

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        AppError BAD_REQUEST: If data is empty or clears a required field
        AppError NOT_FOUND: If no such user
    """
    reject_nulls(data, REQUIRED_FIELDS)
    data = dict(data)
    if data.get("password"):
        data["password"] = get_password_hash(data["password"])

    update_set = sql_for_partial_update(data, FIELD_NAME_MAP)

    rows = execute(
        db,
        f"""UPDATE users
            SET {update_set.clause}
            WHERE username = {update_set.next_placeholder}
            RETURNING {USER_COLUMNS}""",
        [*update_set.values, username],
    )
    if not rows:
        db.rollback()
        raise AppError.not_found(f"No user: {username}")

    db.commit()
    logger.info(f"Updated user {username}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, username: str) -> None:
    """
    Delete a user.

    Raises:
        AppError NOT_FOUND: If no such user
    """
    rows = execute(
        db,
        """DELETE
           FROM users
           WHERE username = $1
           RETURNING username""",
        [username],
    )
    if not rows:
        db.rollback()
        raise AppError.not_found(f"No user: {username}")

    db.commit()
    logger.info(f"Deleted user {username}")


def apply(db: Session, username: str, job_id: int) -> None:
    """
    Record that a user applied to a job.

    Applying twice violates the applications primary key; that IntegrityError
    is left for the caller.

    Raises:
        AppError BAD_REQUEST: Unknown user or job
    """
    if not execute(db, "SELECT username FROM users WHERE username = $1", [username]):
        raise AppError.bad_request(f"No user with username of: {username}")

    if not execute(db, "SELECT id FROM jobs WHERE id = $1", [job_id]):
        raise AppError.bad_request(f"No job with id of: {job_id}")

    execute(
        db,
        """INSERT INTO applications (username, job_id)
           VALUES ($1, $2)""",
        [username, job_id],
    )
    db.commit()
    logger.info(f"User {username} applied to job {job_id}")
