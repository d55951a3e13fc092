"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Seeded companies, jobs and users
- Auth tokens for a regular user and an admin
"""

import os

# Cheap hashes for tests; must be set before settings are loaded
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, execute, get_db
from jobly.core.security import create_access_token, get_password_hash
from jobly import models  # noqa: F401
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh, empty database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db_session):
    """
    Database with three companies, five jobs and two users.

    Jobs are inserted in order, so ids ascend:
    Software Engineer I, II, III, Office Manager, Intern.
    """
    companies = [
        ("c1", "C1", 1, "Desc1", "http://c1.img"),
        ("c2", "C2", 2, "Desc2", "http://c2.img"),
        ("c3", "C3", 3, "Desc3", "http://c3.img"),
    ]
    for company in companies:
        execute(
            db_session,
            """INSERT INTO companies (handle, name, num_employees, description, logo_url)
               VALUES ($1, $2, $3, $4, $5)""",
            company,
        )

    jobs = [
        ("Software Engineer I", 70000, 0.09, "c1"),
        ("Software Engineer II", 100000, 0.05, "c1"),
        ("Software Engineer III", 150000, 0.03, "c2"),
        ("Office Manager", 50000, 0, "c3"),
        ("Intern", None, None, "c3"),
    ]
    for job in jobs:
        execute(
            db_session,
            "INSERT INTO jobs (title, salary, equity, company_handle) VALUES ($1, $2, $3, $4)",
            job,
        )

    users = [
        ("u1", get_password_hash("password1"), "U1F", "U1L", "user1@example.com", False),
        ("admin", get_password_hash("password2"), "AdF", "AdL", "admin@example.com", True),
    ]
    for user in users:
        execute(
            db_session,
            """INSERT INTO users (username, password, first_name, last_name, email, is_admin)
               VALUES ($1, $2, $3, $4, $5, $6)""",
            user,
        )

    db_session.commit()
    return db_session


@pytest.fixture
def job_ids(seeded_db):
    """Map of seeded job title -> id"""
    rows = execute(seeded_db, "SELECT id, title FROM jobs")
    return {row["title"]: row["id"] for row in rows}


@pytest.fixture
def client(seeded_db):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield seeded_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def u1_headers():
    """Auth headers for the regular user u1"""
    return {"Authorization": f"Bearer {create_access_token('u1', False)}"}


@pytest.fixture
def admin_headers():
    """Auth headers for the admin user"""
    return {"Authorization": f"Bearer {create_access_token('admin', True)}"}
