"""
Tests for the query-execution helper.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from jobly.core.database import execute


class TestExecute:
    """Tests for execute()"""

    def test_binds_positional_placeholders(self, seeded_db):
        rows = execute(
            seeded_db,
            "SELECT handle FROM companies WHERE num_employees >= $1 AND num_employees <= $2 ORDER BY handle",
            [2, 3],
        )

        assert rows == [{"handle": "c2"}, {"handle": "c3"}]

    def test_double_digit_placeholders(self, db_session):
        values = list(range(1, 12))
        placeholders = ", ".join(f"${i} AS v{i}" for i in range(1, 12))

        rows = execute(db_session, f"SELECT {placeholders}", values)

        assert list(rows[0].values()) == values

    def test_same_placeholder_twice(self, seeded_db):
        rows = execute(seeded_db, "SELECT handle FROM companies WHERE handle = $1 OR name = $1", ["c1"])

        assert rows == [{"handle": "c1"}]

    def test_ilike_is_case_insensitive(self, seeded_db):
        rows = execute(seeded_db, "SELECT title FROM jobs WHERE title ILIKE $1 ORDER BY id", ["%ENGINEER III%"])

        assert rows == [{"title": "Software Engineer III"}]

    def test_labels_are_row_keys(self, seeded_db):
        rows = execute(seeded_db, 'SELECT num_employees AS "numEmployees" FROM companies WHERE handle = $1', ["c1"])

        assert rows == [{"numEmployees": 1}]

    def test_statement_without_rows(self, seeded_db):
        result = execute(seeded_db, "DELETE FROM jobs WHERE title = $1", ["Intern"])

        assert result == []

    def test_constraint_violation_propagates(self, seeded_db):
        with pytest.raises(IntegrityError):
            execute(
                seeded_db,
                "INSERT INTO companies (handle, name, description) VALUES ($1, $2, $3)",
                ["c1", "Other", "dup handle"],
            )
        seeded_db.rollback()
