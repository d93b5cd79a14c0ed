"""Integration tests for recommendation runs against a SQLite database."""

import threading
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from app.matching import EligibilityScorer, InterestTaxonomy
from app.persistence import (
    MatchResultRepository,
    ProfileRepository,
    ScholarshipRepository,
    close_database,
    get_session,
    init_database,
)
from app.persistence.schema import MatchResultModel
from app.recommendation import MatchNotFoundError, ProfileNotFoundError, RecommendationService
from tests.helpers import NOW, make_profile, make_scholarship


@pytest.fixture
def test_database(tmp_path):
    """Setup test database with file storage."""
    db_file = tmp_path / "test_recommendation_flow.db"
    db_url = f"sqlite:///{db_file}"
    init_database(db_url)
    yield db_url
    close_database()


@pytest.fixture
def catalog(test_database):
    """Store one student and three scholarships, two of them eligible."""
    with get_session() as session:
        ProfileRepository(session).upsert(make_profile())
        scholarships = ScholarshipRepository(session)
        scholarships.upsert(make_scholarship(scholarship_id=10))
        scholarships.upsert(
            make_scholarship(
                scholarship_id=20,
                title="Kenya Merit Award",
                eligibility_countries=["Kenya"],
                min_gpa=3.0,
            )
        )
        scholarships.upsert(
            make_scholarship(scholarship_id=30, title="Ghana Only", eligibility_countries=["Ghana"])
        )


@pytest.fixture
def service():
    return RecommendationService(
        scorer=EligibilityScorer(InterestTaxonomy()),
        clock=lambda: NOW,
    )


def _stored_count(student_id):
    with get_session() as session:
        stmt = select(func.count()).select_from(MatchResultModel).where(
            MatchResultModel.student_id == student_id
        )
        return session.execute(stmt).scalar_one()


class TestRecommendationFlow:
    """End-to-end recompute workflows through the SQL repositories."""

    def test_recompute_stores_and_ranks(self, catalog, service):
        recommendations = service.get_recommendations(1)

        assert [r.scholarship_id for r in recommendations] == [20, 10]
        assert [r.match_score for r in recommendations] == [115, 90]
        assert recommendations[0].title == "Kenya Merit Award"
        assert _stored_count(1) == 2

    def test_recompute_twice_keeps_one_row_per_pair(self, catalog, service):
        first = service.get_recommendations(1)
        second = service.get_recommendations(1)

        assert [(r.scholarship_id, r.match_score) for r in first] == [
            (r.scholarship_id, r.match_score) for r in second
        ]
        assert _stored_count(1) == 2
        assert {r.match_id for r in first}.isdisjoint({r.match_id for r in second})

    def test_catalog_changes_replace_stale_matches(self, catalog, service):
        service.get_recommendations(1)

        with get_session() as session:
            ScholarshipRepository(session).upsert(
                make_scholarship(scholarship_id=10, status="rejected")
            )

        recommendations = service.get_recommendations(1)

        assert [r.scholarship_id for r in recommendations] == [20]
        assert _stored_count(1) == 1

    def test_profile_changes_rescore(self, catalog, service):
        service.get_recommendations(1)

        with get_session() as session:
            ProfileRepository(session).upsert(make_profile(gpa_max=None, gpa_min=None))

        recommendations = service.get_recommendations(1)

        assert [(r.scholarship_id, r.match_score) for r in recommendations] == [(20, 95), (10, 90)]
        assert recommendations[0].unmatched_criteria == [
            "GPA not provided (minimum 3.00 required)"
        ]

    def test_missing_profile(self, catalog, service):
        with pytest.raises(ProfileNotFoundError):
            service.get_recommendations(2)

        assert _stored_count(2) == 0

    def test_failed_run_keeps_previous_matches(self, catalog, service):
        """Test a failure after the delete rolls the whole run back."""
        previous = service.get_recommendations(1)

        with patch.object(service, "score_candidates", side_effect=RuntimeError("scoring failed")):
            with pytest.raises(RuntimeError):
                service.get_recommendations(1)

        with get_session() as session:
            remaining = MatchResultRepository(session).query_ordered(1, NOW)
        assert [r.match_id for r in remaining] == [r.match_id for r in previous]

    def test_concurrent_recomputes_for_one_student(self, catalog, service):
        errors = []

        def worker():
            try:
                service.get_recommendations(1)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert _stored_count(1) == 2

    def test_purged_match_id_is_not_reused(self, test_database, service):
        """Test a match id deleted by a recompute never resolves to a newer row."""
        with get_session() as session:
            ProfileRepository(session).upsert(make_profile())
            ScholarshipRepository(session).upsert(make_scholarship(scholarship_id=10))

        (old,) = service.get_recommendations(1)

        with get_session() as session:
            scholarships = ScholarshipRepository(session)
            scholarships.upsert(make_scholarship(scholarship_id=10, status="rejected"))
            scholarships.upsert(make_scholarship(scholarship_id=20))

        (new,) = service.get_recommendations(1)

        assert new.scholarship_id == 20
        assert new.match_id != old.match_id
        with pytest.raises(MatchNotFoundError):
            service.get_match_breakdown(1, old.match_id)
