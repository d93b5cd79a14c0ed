"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the database schema and provides
conversion methods between ORM models and domain models.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from app.domain.models import MatchRecord, Scholarship, ScholarshipStatus, StudentProfile

logger = logging.getLogger(__name__)

Base = declarative_base()


class StudentProfileModel(Base):
    """ORM model for student_profiles table.

    Stores the eligibility-relevant attributes of a student. Age is not
    stored; only the date of birth (ISO date string).
    """

    __tablename__ = "student_profiles"

    student_id = Column(Integer, primary_key=True, autoincrement=False)

    country = Column(String(100), nullable=True)
    academic_level = Column(String(50), nullable=True)
    field_of_study = Column(String(100), nullable=True)
    interest = Column(String(50), nullable=True)
    gender = Column(String(10), nullable=True)
    date_of_birth = Column(String(10), nullable=True)
    gpa_min = Column(Float, nullable=True)
    gpa_max = Column(Float, nullable=True)
    is_disabled = Column(Boolean, nullable=True)
    income_level = Column(String(20), nullable=True)

    def to_domain(self) -> StudentProfile:
        """Convert ORM model to domain model."""
        return StudentProfile(
            student_id=self.student_id,
            country=self.country,
            academic_level=self.academic_level,
            field_of_study=self.field_of_study,
            interest=self.interest,
            gender=self.gender,
            date_of_birth=self.date_of_birth,
            gpa_min=self.gpa_min,
            gpa_max=self.gpa_max,
            is_disabled=self.is_disabled,
            income_level=self.income_level,
        )

    @classmethod
    def from_domain(cls, profile: StudentProfile) -> "StudentProfileModel":
        """Create ORM model from domain model."""
        model = cls(student_id=profile.student_id)
        model.apply(profile)
        return model

    def apply(self, profile: StudentProfile) -> None:
        """Copy every mutable attribute from a domain profile."""
        self.country = profile.country
        self.academic_level = profile.academic_level
        self.field_of_study = profile.field_of_study
        self.interest = profile.interest
        self.gender = profile.gender
        self.date_of_birth = _format_date(profile.date_of_birth)
        self.gpa_min = profile.gpa_min
        self.gpa_max = profile.gpa_max
        self.is_disabled = profile.is_disabled
        self.income_level = profile.income_level


class ScholarshipModel(Base):
    """ORM model for scholarships table.

    Holds listing details and structured eligibility predicates. List
    predicates are stored as JSON arrays.
    """

    __tablename__ = "scholarships"

    scholarship_id = Column(Integer, primary_key=True, autoincrement=True)

    # Listing details
    title = Column(String(150), nullable=False)
    organization_name = Column(String(150), nullable=False, default="")
    country = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="draft")
    deadline = Column(String(50), nullable=False)

    # Eligibility predicates
    education_level = Column(String(50), nullable=True)
    fields_of_study = Column(JSON, nullable=False, default=list)
    eligibility_gender = Column(String(10), nullable=True)
    eligibility_countries = Column(JSON, nullable=True)
    min_age = Column(Integer, nullable=True)
    max_age = Column(Integer, nullable=True)
    requires_disability = Column(Boolean, nullable=True)
    income_level = Column(String(20), nullable=True)
    min_gpa = Column(Float, nullable=True)

    __table_args__ = (Index("idx_scholarships_candidate", "status", "deadline"),)

    def to_domain(self) -> Scholarship:
        """Convert ORM model to domain model."""
        return Scholarship(
            scholarship_id=self.scholarship_id,
            title=self.title,
            organization_name=self.organization_name or "",
            country=self.country,
            status=self.status,
            deadline=_parse_datetime(self.deadline),
            education_level=self.education_level,
            fields_of_study=self.fields_of_study,
            eligibility_gender=self.eligibility_gender,
            eligibility_countries=self.eligibility_countries,
            min_age=self.min_age,
            max_age=self.max_age,
            requires_disability=self.requires_disability,
            income_level=self.income_level,
            min_gpa=self.min_gpa,
        )

    @classmethod
    def from_domain(cls, scholarship: Scholarship) -> "ScholarshipModel":
        """Create ORM model from domain model."""
        model = cls(scholarship_id=scholarship.scholarship_id)
        model.apply(scholarship)
        return model

    def apply(self, scholarship: Scholarship) -> None:
        """Copy every mutable attribute from a domain scholarship."""
        self.title = scholarship.title
        self.organization_name = scholarship.organization_name
        self.country = scholarship.country
        self.status = ScholarshipStatus(scholarship.status).value
        self.deadline = _format_datetime(scholarship.deadline)
        self.education_level = scholarship.education_level
        self.fields_of_study = list(scholarship.fields_of_study)
        self.eligibility_gender = scholarship.eligibility_gender
        self.eligibility_countries = list(scholarship.eligibility_countries)
        self.min_age = scholarship.min_age
        self.max_age = scholarship.max_age
        self.requires_disability = scholarship.requires_disability
        self.income_level = scholarship.income_level
        self.min_gpa = scholarship.min_gpa


class MatchResultModel(Base):
    """ORM model for match_results table.

    One row per (student, scholarship) pair that survived scoring. Rows are
    disposable: each recompute deletes all of a student's rows first.
    """

    __tablename__ = "match_results"

    match_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(
        Integer,
        ForeignKey("student_profiles.student_id", ondelete="CASCADE"),
        nullable=False,
    )
    scholarship_id = Column(
        Integer,
        ForeignKey("scholarships.scholarship_id", ondelete="CASCADE"),
        nullable=False,
    )
    match_score = Column(Integer, nullable=False)
    matched_criteria = Column(JSON, nullable=False, default=list)
    unmatched_criteria = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("student_id", "scholarship_id", name="uq_match_student_scholarship"),
        Index("idx_match_results_student_score", "student_id", "match_score"),
        # Never hand out the id of a purged match again
        {"sqlite_autoincrement": True},
    )

    def to_domain(self) -> MatchRecord:
        """Convert ORM model to domain model."""
        return MatchRecord(
            match_id=self.match_id,
            student_id=self.student_id,
            scholarship_id=self.scholarship_id,
            match_score=self.match_score,
            matched_criteria=list(self.matched_criteria or []),
            unmatched_criteria=list(self.unmatched_criteria or []),
        )

    @classmethod
    def from_domain(cls, record: MatchRecord) -> "MatchResultModel":
        """Create ORM model from domain model (match_id is left to the database)."""
        return cls(
            student_id=record.student_id,
            scholarship_id=record.scholarship_id,
            match_score=record.match_score,
            matched_criteria=list(record.matched_criteria),
            unmatched_criteria=list(record.unmatched_criteria),
        )


def _format_date(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d is not None else None


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO 8601 string for database storage.

    The fixed-width format sorts lexicographically in time order, which the
    deadline comparisons in the repositories rely on.

    Args:
        dt: Datetime object (naive values are treated as UTC)

    Returns:
        ISO 8601 formatted string or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse ISO 8601 string to datetime object.

    Args:
        dt_str: ISO 8601 formatted string

    Returns:
        Timezone-aware datetime in UTC or None
    """
    if dt_str is None or dt_str == "":
        return None

    dt_str = dt_str.rstrip("Z")

    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        from sqlalchemy import inspect

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
