from sqlalchemy import Column, Integer, Numeric, String, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class Job(Base):
    """
    Job posting belonging to a company.

    ``equity`` is NUMERIC; PostgreSQL hands it back as Decimal, which the API
    serializes as a string.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, nullable=True)
    equity = Column(Numeric, nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity <= 1.0", name="ck_jobs_equity"),
    )

    # Relationships
    company = relationship("Company", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
