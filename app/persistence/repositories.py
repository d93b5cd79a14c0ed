"""Data access layer (repositories) for persistence operations.

This module provides repository classes for student profiles, the scholarship
catalog, and match results. Repositories encapsulate database operations and
return domain models rather than ORM models.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.models import (
    MatchRecord,
    Recommendation,
    Scholarship,
    ScholarshipStatus,
    StudentProfile,
)
from app.domain.ports import CatalogReader, MatchWriter, ProfileReader

from .exceptions import DataIntegrityError, PersistenceError
from .schema import (
    MatchResultModel,
    ScholarshipModel,
    StudentProfileModel,
    _format_datetime,
    _parse_datetime,
)

logger = logging.getLogger(__name__)


class ProfileRepository(ProfileReader):
    """Repository for student profile operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def find_profile(self, student_id: int) -> Optional[StudentProfile]:
        """Retrieve a profile by student id.

        Args:
            student_id: Student identity

        Returns:
            StudentProfile if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            profile_model = self.session.get(StudentProfileModel, student_id)
            if profile_model is None:
                return None
            return profile_model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving profile for student {student_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve profile: {e}") from e

    def upsert(self, profile: StudentProfile) -> StudentProfile:
        """Insert a new profile or overwrite an existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(StudentProfileModel, profile.student_id)
            if existing:
                existing.apply(profile)
                self.session.flush()
                return existing.to_domain()

            profile_model = StudentProfileModel.from_domain(profile)
            self.session.add(profile_model)
            self.session.flush()
            return profile_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting profile {profile.student_id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert profile due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting profile {profile.student_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert profile: {e}") from e


class ScholarshipRepository(CatalogReader):
    """Repository for scholarship catalog operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, scholarship_id: int) -> Optional[Scholarship]:
        """Retrieve a scholarship by id, or None if absent.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ScholarshipModel, scholarship_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving scholarship {scholarship_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve scholarship: {e}") from e

    def find_approved_future(self, now: datetime) -> List[Scholarship]:
        """Query candidate scholarships: approved, with a deadline strictly after now.

        Args:
            now: Evaluation instant (UTC)

        Returns:
            List of Scholarship domain models (ordered by scholarship_id)

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(ScholarshipModel)
                .where(
                    ScholarshipModel.status == ScholarshipStatus.APPROVED.value,
                    ScholarshipModel.deadline > _format_datetime(now),
                )
                .order_by(ScholarshipModel.scholarship_id.asc())
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving candidate scholarships: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve scholarships: {e}") from e

    def upsert(self, scholarship: Scholarship) -> Scholarship:
        """Insert a new scholarship or overwrite an existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(ScholarshipModel, scholarship.scholarship_id)
            if existing:
                existing.apply(scholarship)
                self.session.flush()
                return existing.to_domain()

            model = ScholarshipModel.from_domain(scholarship)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error upserting scholarship {scholarship.scholarship_id}: {e}",
                exc_info=True,
            )
            raise DataIntegrityError(
                f"Failed to upsert scholarship due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting scholarship {scholarship.scholarship_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert scholarship: {e}") from e


class MatchResultRepository(MatchWriter):
    """Repository for match result operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def delete_all(self, student_id: int) -> int:
        """Delete every match row for a student.

        Args:
            student_id: Owning student

        Returns:
            Count of deleted rows

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = delete(MatchResultModel).where(MatchResultModel.student_id == student_id)
            result = self.session.execute(stmt)
            self.session.flush()
            return result.rowcount

        except SQLAlchemyError as e:
            logger.error(f"Error deleting matches for student {student_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete matches: {e}") from e

    def insert_many(self, records: List[MatchRecord]) -> List[MatchRecord]:
        """Insert match rows in one flush.

        Args:
            records: MatchRecord domain models (match_id ignored)

        Returns:
            Persisted MatchRecord domain models with match_id assigned

        Raises:
            DataIntegrityError: If a (student, scholarship) pair already has a row
            PersistenceError: If database error occurs
        """
        if not records:
            return []

        try:
            models = [MatchResultModel.from_domain(record) for record in records]
            self.session.add_all(models)
            self.session.flush()
            return [model.to_domain() for model in models]

        except IntegrityError as e:
            logger.error(f"Integrity error inserting {len(records)} matches: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert matches due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting matches: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert matches: {e}") from e

    def query_ordered(self, student_id: int, now: datetime) -> List[Recommendation]:
        """Query a student's matches joined with scholarship details.

        Only scholarships that are still approved with a deadline after ``now``
        are returned, in case the catalog changed after scoring.

        Args:
            student_id: Owning student
            now: Evaluation instant (UTC)

        Returns:
            Recommendations ordered by match_score DESC, then scholarship_id ASC

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(MatchResultModel, ScholarshipModel)
                .join(
                    ScholarshipModel,
                    MatchResultModel.scholarship_id == ScholarshipModel.scholarship_id,
                )
                .where(
                    MatchResultModel.student_id == student_id,
                    ScholarshipModel.status == ScholarshipStatus.APPROVED.value,
                    ScholarshipModel.deadline > _format_datetime(now),
                )
                .order_by(
                    MatchResultModel.match_score.desc(),
                    ScholarshipModel.scholarship_id.asc(),
                )
            )
            rows = self.session.execute(stmt).all()

            return [
                Recommendation(
                    match_id=match.match_id,
                    scholarship_id=scholarship.scholarship_id,
                    title=scholarship.title,
                    organization_name=scholarship.organization_name or "",
                    country=scholarship.country,
                    deadline=_parse_datetime(scholarship.deadline),
                    match_score=match.match_score,
                    matched_criteria=list(match.matched_criteria or []),
                    unmatched_criteria=list(match.unmatched_criteria or []),
                )
                for match, scholarship in rows
            ]

        except SQLAlchemyError as e:
            logger.error(f"Error querying matches for student {student_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to query matches: {e}") from e

    def get_by_id(self, match_id: int) -> Optional[MatchRecord]:
        """Retrieve a single match row by id, or None if absent.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(MatchResultModel, match_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving match {match_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve match: {e}") from e

