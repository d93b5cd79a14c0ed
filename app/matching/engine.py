"""Eligibility matching engine for scoring scholarships against a student profile.

This module implements the scoring logic that:
1. Awards soft points for academic level, field of study and interest overlap
2. Applies hard eligibility checks that disqualify on failure
3. Applies the mixed GPA rule (penalty when unknown, disqualify when too low)
4. Records one tagged criterion per check performed
"""

import logging
from datetime import datetime
from typing import List, Optional

from app.domain.models import Scholarship, StudentProfile
from app.logging import get_logger

from .models import Criterion, CriterionKind, Disqualified, Scored, ScoreOutcome
from .taxonomy import InterestTaxonomy

logger = get_logger(__name__, component="matching")

ACADEMIC_LEVEL_POINTS = 40
FIELD_OF_STUDY_POINTS = 40
INTEREST_POINTS = 20
GENDER_POINTS = 10
COUNTRY_POINTS = 10
AGE_POINTS = 5
EDUCATION_LEVEL_ALLOWED_POINTS = 10
DISABILITY_POINTS = 10
INCOME_LEVEL_POINTS = 10
GPA_POINTS = 15
GPA_MISSING_PENALTY = -5

UNRESTRICTED = "any"


def _same(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; missing values never match."""
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def _is_unrestricted(value: Optional[str]) -> bool:
    return not value or value.strip().lower() == UNRESTRICTED


class EligibilityScorer:
    """Scores one scholarship against one student profile.

    Responsibilities:
    - Soft checks (academic level, field of study, interest) add points only
    - Hard checks (gender, country, age, education level, disability, income)
      stop evaluation and return Disqualified on failure
    - The GPA check penalizes an unknown GPA but disqualifies a GPA below the floor
    - Restrictions the scholarship does not set are skipped entirely

    The scorer holds no per-call state, so one instance can score any number
    of candidates, in any order.
    """

    def __init__(self, taxonomy: InterestTaxonomy, logger_instance: logging.Logger = None):
        """Initialize EligibilityScorer.

        Args:
            taxonomy: Interest taxonomy used for the interest-overlap check
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.taxonomy = taxonomy
        self.logger = logger_instance or logger

    def evaluate(
        self, profile: StudentProfile, scholarship: Scholarship, as_of: datetime
    ) -> ScoreOutcome:
        """Score a scholarship for a student.

        Args:
            profile: Student profile
            scholarship: Candidate scholarship
            as_of: Evaluation instant, used to derive the student's age

        Returns:
            Scored if every check ran, Disqualified at the first failed hard check
        """
        age = profile.age_on(as_of)

        checks = (
            lambda: self._check_academic_level(profile, scholarship),
            lambda: self._check_field_of_study(profile, scholarship),
            lambda: self._check_interest(profile, scholarship),
            lambda: self._check_gender(profile, scholarship),
            lambda: self._check_country(profile, scholarship),
            lambda: self._check_age(age, scholarship),
            lambda: self._check_education_level_allowed(profile, scholarship),
            lambda: self._check_disability(profile, scholarship),
            lambda: self._check_income_level(profile, scholarship),
            lambda: self._check_gpa(profile, scholarship),
        )

        criteria: List[Criterion] = []
        for check in checks:
            criterion = check()
            if criterion is None:
                continue
            if criterion.disqualifies:
                self.logger.debug(
                    f"Scholarship disqualified: {scholarship.scholarship_id}",
                    extra={
                        "event": "matching.candidate.disqualified",
                        "scholarship_id": scholarship.scholarship_id,
                        "check": criterion.kind.value,
                    },
                )
                return Disqualified(failed=criterion, criteria=criteria)
            criteria.append(criterion)

        score = sum(c.points for c in criteria)
        self.logger.debug(
            f"Scholarship scored: {scholarship.scholarship_id}",
            extra={
                "event": "matching.candidate.scored",
                "scholarship_id": scholarship.scholarship_id,
                "score": score,
                "matched_count": len([c for c in criteria if c.passed]),
                "unmatched_count": len([c for c in criteria if not c.passed]),
            },
        )
        return Scored(score=score, criteria=criteria)

    # Soft checks

    @staticmethod
    def _check_academic_level(profile: StudentProfile, scholarship: Scholarship) -> Criterion:
        if _same(scholarship.education_level, profile.academic_level):
            return Criterion(
                CriterionKind.ACADEMIC_LEVEL,
                passed=True,
                points=ACADEMIC_LEVEL_POINTS,
                detail=f"Academic level matches ({scholarship.education_level})",
            )
        if not profile.academic_level:
            detail = "Academic level not provided"
        else:
            detail = (
                f"Academic level {profile.academic_level} differs from required "
                f"{scholarship.education_level or 'level'}"
            )
        return Criterion(CriterionKind.ACADEMIC_LEVEL, passed=False, detail=detail)

    @staticmethod
    def _check_field_of_study(profile: StudentProfile, scholarship: Scholarship) -> Criterion:
        fields = {f.lower() for f in scholarship.fields_of_study}
        if profile.field_of_study and profile.field_of_study.lower() in fields:
            return Criterion(
                CriterionKind.FIELD_OF_STUDY,
                passed=True,
                points=FIELD_OF_STUDY_POINTS,
                detail=f"Field of study matches ({profile.field_of_study})",
            )
        if not profile.field_of_study:
            detail = "Field of study not provided"
        else:
            detail = f"Field of study {profile.field_of_study} is not listed"
        return Criterion(CriterionKind.FIELD_OF_STUDY, passed=False, detail=detail)

    def _check_interest(
        self, profile: StudentProfile, scholarship: Scholarship
    ) -> Optional[Criterion]:
        interest_fields = self.taxonomy.lookup(profile.interest)
        if not interest_fields:
            return None

        if any(f.lower() in interest_fields for f in scholarship.fields_of_study):
            return Criterion(
                CriterionKind.INTEREST,
                passed=True,
                points=INTEREST_POINTS,
                detail=f"Related to your interest in {profile.interest}",
            )
        return Criterion(
            CriterionKind.INTEREST,
            passed=False,
            detail=f"No fields related to your interest in {profile.interest}",
        )

    # Hard checks

    @staticmethod
    def _check_gender(profile: StudentProfile, scholarship: Scholarship) -> Optional[Criterion]:
        required = scholarship.eligibility_gender
        if _is_unrestricted(required):
            return None
        if _same(required, profile.gender):
            return Criterion(
                CriterionKind.GENDER,
                passed=True,
                points=GENDER_POINTS,
                detail=f"Gender requirement met ({required.lower()})",
            )
        return Criterion(
            CriterionKind.GENDER,
            passed=False,
            detail=f"Restricted to {required.lower()} applicants",
            disqualifies=True,
        )

    @staticmethod
    def _check_country(profile: StudentProfile, scholarship: Scholarship) -> Optional[Criterion]:
        countries = scholarship.eligibility_countries
        if not countries or any(_is_unrestricted(c) for c in countries):
            return None
        if any(_same(c, profile.country) for c in countries):
            return Criterion(
                CriterionKind.COUNTRY,
                passed=True,
                points=COUNTRY_POINTS,
                detail=f"Open to applicants from {profile.country}",
            )
        return Criterion(
            CriterionKind.COUNTRY,
            passed=False,
            detail=f"Not open to applicants from {profile.country or 'unspecified country'}",
            disqualifies=True,
        )

    @staticmethod
    def _check_age(age: Optional[int], scholarship: Scholarship) -> Optional[Criterion]:
        min_age, max_age = scholarship.min_age, scholarship.max_age
        if min_age is None and max_age is None:
            return None

        if age is None:
            return Criterion(
                CriterionKind.AGE,
                passed=False,
                detail="Date of birth not provided; age limits could not be verified",
            )

        bounds = f"{min_age if min_age is not None else ''}-{max_age if max_age is not None else ''}"
        if min_age is not None and age < min_age:
            return Criterion(
                CriterionKind.AGE,
                passed=False,
                detail=f"Age {age} is below the minimum of {min_age}",
                disqualifies=True,
            )
        if max_age is not None and age > max_age:
            return Criterion(
                CriterionKind.AGE,
                passed=False,
                detail=f"Age {age} is above the maximum of {max_age}",
                disqualifies=True,
            )
        return Criterion(
            CriterionKind.AGE,
            passed=True,
            points=AGE_POINTS,
            detail=f"Age {age} within eligible range ({bounds})",
        )

    @staticmethod
    def _check_education_level_allowed(
        profile: StudentProfile, scholarship: Scholarship
    ) -> Optional[Criterion]:
        allowed = scholarship.education_level
        if not allowed:
            return None
        if profile.academic_level and profile.academic_level.lower() in allowed.lower():
            return Criterion(
                CriterionKind.EDUCATION_LEVEL_ALLOWED,
                passed=True,
                points=EDUCATION_LEVEL_ALLOWED_POINTS,
                detail=f"Education level eligible ({profile.academic_level})",
            )
        return Criterion(
            CriterionKind.EDUCATION_LEVEL_ALLOWED,
            passed=False,
            detail=f"Only open to {allowed} students",
            disqualifies=True,
        )

    @staticmethod
    def _check_disability(
        profile: StudentProfile, scholarship: Scholarship
    ) -> Optional[Criterion]:
        if not scholarship.requires_disability:
            return None
        if profile.is_disabled:
            return Criterion(
                CriterionKind.DISABILITY,
                passed=True,
                points=DISABILITY_POINTS,
                detail="Meets disability requirement",
            )
        return Criterion(
            CriterionKind.DISABILITY,
            passed=False,
            detail="Reserved for students with a disability",
            disqualifies=True,
        )

    @staticmethod
    def _check_income_level(
        profile: StudentProfile, scholarship: Scholarship
    ) -> Optional[Criterion]:
        required = scholarship.income_level
        if _is_unrestricted(required):
            return None
        if _same(required, profile.income_level):
            return Criterion(
                CriterionKind.INCOME_LEVEL,
                passed=True,
                points=INCOME_LEVEL_POINTS,
                detail=f"Income level requirement met ({required})",
            )
        return Criterion(
            CriterionKind.INCOME_LEVEL,
            passed=False,
            detail=f"Restricted to {required} income households",
            disqualifies=True,
        )

    # Mixed check

    @staticmethod
    def _check_gpa(profile: StudentProfile, scholarship: Scholarship) -> Optional[Criterion]:
        min_gpa = scholarship.min_gpa
        if min_gpa is None:
            return None
        if not profile.has_gpa:
            return Criterion(
                CriterionKind.GPA,
                passed=False,
                points=GPA_MISSING_PENALTY,
                detail=f"GPA not provided (minimum {min_gpa:.2f} required)",
            )
        if profile.gpa_max < min_gpa:
            return Criterion(
                CriterionKind.GPA,
                passed=False,
                detail=f"GPA {profile.gpa_max:.2f} is below the minimum of {min_gpa:.2f}",
                disqualifies=True,
            )
        return Criterion(
            CriterionKind.GPA,
            passed=True,
            points=GPA_POINTS,
            detail=f"GPA meets the minimum of {min_gpa:.2f}",
        )
