"""create_jobly_tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-17 10:12:31.408512

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'companies',
        sa.Column('handle', sa.String(length=25), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('num_employees', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.CheckConstraint('handle = lower(handle)', name='ck_companies_handle_lower'),
        sa.CheckConstraint('num_employees >= 0', name='ck_companies_num_employees'),
        sa.PrimaryKeyConstraint('handle'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'users',
        sa.Column('username', sa.String(length=25), nullable=False),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('first_name', sa.Text(), nullable=False),
        sa.Column('last_name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint("position('@' IN email) > 1", name='ck_users_email'),
        sa.PrimaryKeyConstraint('username'),
    )

    # equity is NUMERIC: comes back as Decimal, not float
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('salary', sa.Integer(), nullable=True),
        sa.Column('equity', sa.Numeric(), nullable=True),
        sa.Column('company_handle', sa.String(length=25), nullable=False),
        sa.CheckConstraint('salary >= 0', name='ck_jobs_salary'),
        sa.CheckConstraint('equity <= 1.0', name='ck_jobs_equity'),
        sa.ForeignKeyConstraint(['company_handle'], ['companies.handle'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)

    op.create_table(
        'applications',
        sa.Column('username', sa.String(length=25), nullable=False),
        sa.Column('job_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['username'], ['users.username'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('username', 'job_id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('applications')
    op.drop_index(op.f('ix_jobs_id'), table_name='jobs')
    op.drop_table('jobs')
    op.drop_table('users')
    op.drop_table('companies')
