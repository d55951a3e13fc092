"""
CRUD operations for jobs.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import AppError
from jobly.core.sql import JOB_FILTERS, reject_nulls, sql_for_filters, sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Fields whose column is NOT NULL
REQUIRED_FIELDS = ("title",)


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job for an existing company.

    The company handle is matched lower-cased, like handles are stored.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}; salary and equity optional

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        AppError BAD_REQUEST: If the company does not exist
    """
    handle = data["companyHandle"].lower()
    company = execute(db, "SELECT handle FROM companies WHERE handle = $1", [handle])
    if not company:
        raise AppError.bad_request(f"{handle} is an invalid company handle")

    rows = execute(
        db,
        f"""INSERT INTO jobs
            (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [data["title"], data.get("salary"), data.get("equity"), handle],
    )
    db.commit()

    job = rows[0]
    logger.info(f"Created job {job['id']} for company {handle}")
    return job


def find_all(db: Session, query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs, most recently added first.

    Accepts the filters title (substring, case-insensitive), minSalary and
    hasEquity ("true" keeps only jobs with non-zero equity; anything else is
    ignored).

    Returns:
        [{id, title, salary, equity, companyHandle}, ...]

    Raises:
        AppError BAD_REQUEST: Unknown or repeated filter
    """
    where = sql_for_filters(query, JOB_FILTERS) if query else None

    if not where:
        return execute(
            db,
            f"""SELECT {JOB_COLUMNS}
                FROM jobs
                ORDER BY id DESC""",
        )

    return execute(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            WHERE {where.clause}
            ORDER BY id DESC""",
        where.values,
    )


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        AppError NOT_FOUND: If no such job
    """
    rows = execute(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            WHERE id = $1""",
        [job_id],
    )
    if not rows:
        raise AppError.not_found(f"No job with id of: {job_id}")
    return rows[0]


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Args:
        db: Database session
        job_id: Job to update
        data: Any of {title, salary, equity}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        AppError BAD_REQUEST: If data is empty or clears the title
        AppError NOT_FOUND: If no such job
    """
    reject_nulls(data, REQUIRED_FIELDS)
    # Job fields are single words; column names match
    update_set = sql_for_partial_update(data, {})

    rows = execute(
        db,
        f"""UPDATE jobs
            SET {update_set.clause}
            WHERE id = {update_set.next_placeholder}
            RETURNING {JOB_COLUMNS}""",
        [*update_set.values, job_id],
    )
    if not rows:
        db.rollback()
        raise AppError.not_found(f"No job with id of: {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        AppError NOT_FOUND: If no such job
    """
    rows = execute(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    )
    if not rows:
        db.rollback()
        raise AppError.not_found(f"No job found with id of: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
