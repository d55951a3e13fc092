"""
CRUD operations (Create, Read, Update, Delete) for the job board.

This layer sits between the API routes and the database: it owns the SQL,
builds filter and update fragments, and raises AppError for missing or
invalid records.
"""

from jobly.crud import company, job, user

__all__ = ["company", "job", "user"]
