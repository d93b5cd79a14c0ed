"""Recommendation orchestration: recompute-and-replace a student's matches."""

import threading
import time
import weakref
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, ContextManager, Iterator, List, Optional

from app.config.models import AppConfig, MatchingConfig
from app.domain.models import Recommendation, Scholarship, StudentProfile
from app.domain.ports import CatalogReader, MatchWriter, ProfileReader
from app.logging import get_logger
from app.logging.context import log_context
from app.matching.engine import EligibilityScorer
from app.matching.models import CandidateMatch, Scored
from app.matching.taxonomy import InterestTaxonomy
from app.matching.utils import build_match_record, build_rationale_dict
from app.persistence.database import get_session
from app.persistence.repositories import (
    MatchResultRepository,
    ProfileRepository,
    ScholarshipRepository,
)
from app.utils.timestamps import utc_now

from .exceptions import (
    ExplanationUnavailableError,
    MatchAccessDeniedError,
    MatchNotFoundError,
    ProfileNotFoundError,
)
from .models import MatchBreakdown, RecommendationRun

logger = get_logger(__name__, component="recommendation")


@dataclass
class RecommendationStores:
    """The three stores a recommendation run reads and writes, sharing one transaction."""

    profiles: ProfileReader
    catalog: CatalogReader
    matches: MatchWriter


@contextmanager
def sql_unit_of_work() -> Iterator[RecommendationStores]:
    """Open one database session and expose the SQL repositories over it.

    Commits when the block exits cleanly, rolls back on any exception.
    """
    with get_session() as session:
        yield RecommendationStores(
            profiles=ProfileRepository(session),
            catalog=ScholarshipRepository(session),
            matches=MatchResultRepository(session),
        )


class StudentLockRegistry:
    """Hands out one lock per student id.

    Entries are held weakly, so a student's lock is dropped once no run holds it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[int, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def for_student(self, student_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[student_id] = lock
            return lock


def build_scorer(app_config: AppConfig) -> EligibilityScorer:
    """Build a scorer whose taxonomy includes any configured interest categories."""
    taxonomy = InterestTaxonomy(overrides=app_config.matching.interest_categories)
    return EligibilityScorer(taxonomy)


class RecommendationService:
    """
    Computes, persists and returns ranked scholarship recommendations.

    Every call to get_recommendations discards the student's previous matches
    and rebuilds them from the current profile and catalog. The delete, the
    insert and the final query share one transaction, and calls for the same
    student are serialized.
    """

    def __init__(
        self,
        scorer: EligibilityScorer,
        matching_config: Optional[MatchingConfig] = None,
        unit_of_work: Callable[[], ContextManager[RecommendationStores]] = sql_unit_of_work,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the recommendation service.

        Args:
            scorer: Scorer applied to each candidate scholarship
            matching_config: Threshold and cap settings (defaults when None)
            unit_of_work: Factory yielding stores bound to one transaction
            clock: Returns the current UTC instant
        """
        self.scorer = scorer
        self.matching_config = matching_config or MatchingConfig()
        self.unit_of_work = unit_of_work
        self.clock = clock
        self._locks = StudentLockRegistry()

    def get_recommendations(self, student_id: int) -> List[Recommendation]:
        """Recompute and return the student's recommendations, best score first."""
        return self.recompute(student_id).recommendations

    def recompute(self, student_id: int) -> RecommendationRun:
        """
        Replace the student's stored matches and return the run summary.

        This method:
        1. Deletes every stored match for the student
        2. Loads the profile (ProfileNotFoundError if absent)
        3. Selects approved scholarships with a future deadline
        4. Scores each candidate and keeps those at or above the threshold
        5. Inserts the survivors
        6. Re-reads the stored matches joined with their scholarships

        Args:
            student_id: Student to recompute for

        Returns:
            RecommendationRun with counts and the ordered recommendations

        Raises:
            ProfileNotFoundError: If the student has no profile
            PersistenceError: If the store fails (nothing is committed)
        """
        started = time.time()
        run = RecommendationRun(student_id=student_id)

        with log_context(student_id=student_id), self._locks.for_student(student_id):
            now = self.clock()
            logger.info(
                "Recommendation run started",
                extra={
                    "event": "recommendation.run.started",
                    "inclusion_threshold": self.matching_config.inclusion_threshold,
                },
            )

            with self.unit_of_work() as stores:
                run.deleted_count = stores.matches.delete_all(student_id)

                profile = stores.profiles.find_profile(student_id)
                if profile is None:
                    logger.warning(
                        "Student profile not found",
                        extra={"event": "recommendation.profile.missing"},
                    )
                    raise ProfileNotFoundError(student_id)

                scholarships = stores.catalog.find_approved_future(now)
                candidates = self.score_candidates(profile, scholarships, now)

                run.candidates_evaluated = len(candidates)
                run.disqualified_count = len(
                    [c for c in candidates if c.outcome.is_disqualified]
                )
                run.below_threshold_count = len(
                    [c for c in candidates if not c.outcome.is_disqualified and not c.included]
                )

                records = [
                    build_match_record(student_id, c, self.matching_config.score_cap)
                    for c in candidates
                    if c.included
                ]
                if records:
                    stored = stores.matches.insert_many(records)
                    run.stored_count = len(stored)

                run.recommendations = stores.matches.query_ordered(student_id, now)

            run.duration_seconds = time.time() - started
            logger.info(
                "Recommendation run completed",
                extra={
                    "event": "recommendation.run.completed",
                    "duration_ms": int(run.duration_seconds * 1000),
                    "deleted_count": run.deleted_count,
                    "candidates_evaluated": run.candidates_evaluated,
                    "disqualified_count": run.disqualified_count,
                    "below_threshold_count": run.below_threshold_count,
                    "stored_count": run.stored_count,
                    "returned_count": run.returned_count,
                },
            )

        return run

    def score_candidates(
        self, profile: StudentProfile, scholarships: List[Scholarship], now: datetime
    ) -> List[CandidateMatch]:
        """
        Score each scholarship and mark which ones survive.

        Scholarships that are not candidates at ``now`` are skipped, whatever
        the catalog returned.

        Args:
            profile: Student profile
            scholarships: Candidate scholarships
            now: Evaluation instant

        Returns:
            One CandidateMatch per scored scholarship, in input order
        """
        threshold = self.matching_config.inclusion_threshold
        candidates: List[CandidateMatch] = []

        for scholarship in scholarships:
            if not scholarship.is_candidate(now):
                logger.debug(
                    f"Skipping non-candidate scholarship {scholarship.scholarship_id}",
                    extra={
                        "event": "recommendation.candidate.skipped",
                        "scholarship_id": scholarship.scholarship_id,
                    },
                )
                continue

            outcome = self.scorer.evaluate(profile, scholarship, now)
            included = isinstance(outcome, Scored) and outcome.meets(threshold)
            if not included:
                logger.debug(
                    f"Scholarship excluded: {scholarship.scholarship_id}",
                    extra={
                        "event": "recommendation.candidate.excluded",
                        "scholarship_id": scholarship.scholarship_id,
                        "rationale": build_rationale_dict(outcome),
                    },
                )
            candidates.append(
                CandidateMatch(scholarship=scholarship, outcome=outcome, included=included)
            )

        return candidates

    def get_match_breakdown(self, student_id: int, match_id: int) -> MatchBreakdown:
        """
        Return the stored criteria behind one of the student's matches.

        Args:
            student_id: Student asking for the breakdown
            match_id: Match row id

        Returns:
            MatchBreakdown with matched and unmatched criteria

        Raises:
            MatchNotFoundError: If the match does not exist
            MatchAccessDeniedError: If the match belongs to another student
            ExplanationUnavailableError: If the match has no matched criteria
        """
        with log_context(student_id=student_id, match_id=match_id):
            with self.unit_of_work() as stores:
                record = stores.matches.get_by_id(match_id)

            if record is None:
                raise MatchNotFoundError(match_id)

            if record.student_id != student_id:
                logger.warning(
                    "Match requested by a student who does not own it",
                    extra={
                        "event": "recommendation.breakdown.denied",
                        "owner_student_id": record.student_id,
                    },
                )
                raise MatchAccessDeniedError(match_id)

            if not record.matched_criteria:
                raise ExplanationUnavailableError(match_id)

            return MatchBreakdown(
                match_id=record.match_id,
                scholarship_id=record.scholarship_id,
                match_score=record.match_score,
                matched_criteria=list(record.matched_criteria),
                unmatched_criteria=list(record.unmatched_criteria),
            )
