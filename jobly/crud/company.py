"""
CRUD operations for companies.

Statements are plain SQL run through ``execute``; listing filters and partial
updates are assembled by the fragment builders in jobly.core.sql.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import AppError
from jobly.core.sql import COMPANY_FILTERS, reject_nulls, sql_for_filters, sql_for_partial_update

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = ('handle, name, description, '
                   'num_employees AS "numEmployees", logo_url AS "logoUrl"')

# API field name -> column, for fields spelled differently
FIELD_NAME_MAP = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# Fields whose column is NOT NULL
REQUIRED_FIELDS = ("name", "description")


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        AppError BAD_REQUEST: If the handle is already taken
    """
    handle = data["handle"]
    duplicate = execute(db, "SELECT handle FROM companies WHERE handle = $1", [handle])
    if duplicate:
        raise AppError.bad_request(f"Duplicate company: {handle}")

    rows = execute(
        db,
        f"""INSERT INTO companies
            (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {COMPANY_COLUMNS}""",
        [
            handle,
            data["name"],
            data["description"],
            data.get("numEmployees"),
            data.get("logoUrl"),
        ],
    )
    db.commit()

    logger.info(f"Created company {handle}")
    return rows[0]


def find_all(db: Session, query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name.

    Accepts the filters name (substring, case-insensitive), minEmployees and
    maxEmployees. Filters present but not usable (empty name, non-numeric
    bounds) are ignored.

    Args:
        db: Database session
        query: Filter bag from the request's query string

    Returns:
        [{handle, name, description, numEmployees, logoUrl}, ...]

    Raises:
        AppError BAD_REQUEST: Unknown or repeated filter, or minEmployees > maxEmployees
    """
    where = sql_for_filters(query, COMPANY_FILTERS) if query else None

    if not where:
        return execute(
            db,
            f"""SELECT {COMPANY_COLUMNS}
                FROM companies
                ORDER BY name""",
        )

    return execute(
        db,
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE {where.clause}
            ORDER BY name""",
        where.values,
    )


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Get a company with its jobs.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...], newest first

    Raises:
        AppError NOT_FOUND: If no such company
    """
    rows = execute(
        db,
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [handle],
    )
    if not rows:
        raise AppError.not_found(f"No company: {handle}")

    company = rows[0]
    company["jobs"] = execute(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id DESC""",
        [handle],
    )
    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company: only the fields in ``data`` change.

    Args:
        db: Database session
        handle: Company to update
        data: Any of {name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        AppError BAD_REQUEST: If data is empty or clears a required field
        AppError NOT_FOUND: If no such company
    """
    reject_nulls(data, REQUIRED_FIELDS)
    update_set = sql_for_partial_update(data, FIELD_NAME_MAP)

    rows = execute(
        db,
        f"""UPDATE companies
            SET {update_set.clause}
            WHERE handle = {update_set.next_placeholder}
            RETURNING {COMPANY_COLUMNS}""",
        [*update_set.values, handle],
    )
    if not rows:
        db.rollback()
        raise AppError.not_found(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        AppError NOT_FOUND: If no such company
    """
    rows = execute(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    )
    if not rows:
        db.rollback()
        raise AppError.not_found(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
