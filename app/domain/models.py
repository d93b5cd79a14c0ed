"""Core domain models for students, scholarships, and match results.

This module defines the data structures used throughout the application:
- StudentProfile: eligibility-relevant attributes of a student
- Scholarship: a catalog entry with its eligibility predicates
- MatchRecord: a persisted (student, scholarship) match row
- Recommendation: a match row joined with scholarship listing details
"""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.utils.timestamps import compute_age, ensure_utc


class Gender(str, Enum):
    """Student gender values."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ScholarshipStatus(str, Enum):
    """Scholarship review lifecycle states."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PUBLISHED = "published"


def _coerce_float(value: Any) -> Optional[float]:
    """Coerce a loosely typed numeric value, returning None when unparsable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _coerce_int(value: Any) -> Optional[int]:
    """Coerce a loosely typed integer value, returning None when unparsable."""
    number = _coerce_float(value)
    if number is None:
        return None
    return int(number)


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped if stripped else None


class StudentProfile(BaseModel):
    """Eligibility-relevant attributes of a student.

    Age is not stored. It is derived from date_of_birth each time the profile
    is evaluated, so results move with the calendar without profile edits.

    GPA is reported as a band (gpa_min, gpa_max). Values that cannot be parsed
    as numbers are kept as None so that the GPA requirement is treated as not
    verifiable rather than rejecting the whole profile.
    """

    student_id: int = Field(..., description="Student identity (1:1 with a user)")
    country: Optional[str] = Field(None, description="Country of residence/nationality")
    academic_level: Optional[str] = Field(None, description="e.g. Undergraduate, Masters")
    field_of_study: Optional[str] = Field(None, description="Declared field of study")
    interest: Optional[str] = Field(None, description="Key into the interest taxonomy")
    gender: Optional[Gender] = Field(None, description="male, female or other")
    date_of_birth: Optional[date] = Field(None, description="Used to derive age")
    gpa_min: Optional[float] = Field(None, description="Lower end of reported GPA band")
    gpa_max: Optional[float] = Field(None, description="Upper end of reported GPA band")
    is_disabled: Optional[bool] = Field(None, description="Disability status")
    income_level: Optional[str] = Field(None, description="Income bucket, e.g. low")

    @field_validator("country", "academic_level", "field_of_study", "interest", "income_level")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace, mapping blank strings to None."""
        return _strip_optional(v)

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v: Any) -> Any:
        """Accept gender case-insensitively; blank means not provided."""
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("gpa_min", "gpa_max", mode="before")
    @classmethod
    def coerce_gpa(cls, v: Any) -> Optional[float]:
        """Parse GPA values, mapping unparsable input to None."""
        return _coerce_float(v)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def coerce_date_of_birth(cls, v: Any) -> Any:
        """Parse ISO date strings, mapping unparsable input to None."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            try:
                return date.fromisoformat(v.strip()[:10])
            except ValueError:
                return None
        return v

    def age_on(self, as_of: datetime) -> Optional[int]:
        """Age in whole years at the given instant, or None without a birth date."""
        return compute_age(self.date_of_birth, as_of)

    @property
    def has_gpa(self) -> bool:
        """Whether the upper end of the GPA band is known."""
        return self.gpa_max is not None

    model_config = {"use_enum_values": True, "json_schema_extra": {"example": {
        "student_id": 42,
        "country": "Kenya",
        "academic_level": "Undergraduate",
        "field_of_study": "Computer Science",
        "interest": "technology",
        "gender": "female",
        "date_of_birth": "2005-03-10",
        "gpa_min": 3.2,
        "gpa_max": 3.6,
        "is_disabled": False,
        "income_level": "low",
    }}}


class Scholarship(BaseModel):
    """Scholarship catalog entry with structured eligibility predicates.

    Any optional predicate that is missing means the scholarship is
    unrestricted on that dimension. Numeric bounds that cannot be parsed are
    treated the same way.
    """

    scholarship_id: int = Field(..., description="Catalog identity")
    title: str = Field(..., description="Scholarship title")
    organization_name: str = Field("", description="Offering organization")
    country: Optional[str] = Field(None, description="Country the scholarship is listed in")
    status: ScholarshipStatus = Field(ScholarshipStatus.DRAFT, description="Review status")
    deadline: datetime = Field(..., description="Application deadline (UTC)")
    education_level: Optional[str] = Field(None, description="Required academic level")
    fields_of_study: List[str] = Field(default_factory=list, description="Eligible fields")
    eligibility_gender: Optional[str] = Field(None, description="male, female, any or unset")
    eligibility_countries: List[str] = Field(
        default_factory=list, description="Eligible countries; empty or 'Any' means unrestricted"
    )
    min_age: Optional[int] = Field(None, description="Inclusive minimum age")
    max_age: Optional[int] = Field(None, description="Inclusive maximum age")
    requires_disability: Optional[bool] = Field(None, description="Only disabled students")
    income_level: Optional[str] = Field(None, description="Income bucket, 'any' or unset")
    min_gpa: Optional[float] = Field(None, description="Minimum GPA")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Strip whitespace from the title."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("education_level", "eligibility_gender", "income_level", "country")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace, mapping blank strings to None."""
        return _strip_optional(v)

    @field_validator("fields_of_study", "eligibility_countries", mode="before")
    @classmethod
    def clean_string_list(cls, v: Any) -> List[str]:
        """Drop blanks from list predicates; None becomes an empty list."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [str(item).strip() for item in v if item is not None and str(item).strip()]

    @field_validator("min_age", "max_age", mode="before")
    @classmethod
    def coerce_age_bound(cls, v: Any) -> Optional[int]:
        """Parse age bounds, mapping unparsable input to None."""
        return _coerce_int(v)

    @field_validator("min_gpa", mode="before")
    @classmethod
    def coerce_min_gpa(cls, v: Any) -> Optional[float]:
        """Parse the GPA floor, mapping unparsable input to None."""
        return _coerce_float(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def expand_date_deadline(cls, v: Any) -> Any:
        """A date-only deadline stays open until the end of that day (UTC)."""
        if isinstance(v, str) and len(v.strip()) == 10:
            try:
                v = date.fromisoformat(v.strip())
            except ValueError:
                return v
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time(23, 59, 59), tzinfo=timezone.utc)
        return v

    @field_validator("deadline")
    @classmethod
    def ensure_deadline_utc(cls, v: datetime) -> datetime:
        """Ensure the deadline is timezone-aware and in UTC."""
        return ensure_utc(v)

    def is_candidate(self, now: datetime) -> bool:
        """Whether this scholarship is approved and still open at ``now``."""
        return self.status == ScholarshipStatus.APPROVED.value and self.deadline > ensure_utc(now)

    model_config = {"use_enum_values": True, "json_schema_extra": {"example": {
        "scholarship_id": 7,
        "title": "Women in Computing Award",
        "organization_name": "Example Foundation",
        "country": "Kenya",
        "status": "approved",
        "deadline": "2027-01-31T23:59:59Z",
        "education_level": "Undergraduate",
        "fields_of_study": ["Computer Science", "Software Engineering"],
        "eligibility_gender": "female",
        "eligibility_countries": ["Kenya", "Uganda"],
        "min_age": 18,
        "max_age": 25,
        "requires_disability": False,
        "income_level": "any",
        "min_gpa": 3.0,
    }}}


class MatchRecord(BaseModel):
    """A persisted match between a student and a scholarship.

    At most one record exists per (student_id, scholarship_id). Records are
    never updated in place; each recompute replaces the whole set.
    """

    match_id: Optional[int] = Field(None, description="Surrogate key, assigned on insert")
    student_id: int = Field(..., description="Owning student")
    scholarship_id: int = Field(..., description="Matched scholarship")
    match_score: int = Field(..., description="Engine score")
    matched_criteria: List[str] = Field(default_factory=list)
    unmatched_criteria: List[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    """A match joined with the scholarship listing details shown to students."""

    match_id: int
    scholarship_id: int
    title: str
    organization_name: str
    country: Optional[str] = None
    deadline: datetime
    match_score: int
    matched_criteria: List[str] = Field(default_factory=list)
    unmatched_criteria: List[str] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """Serialize for JSON output."""
        return self.model_dump(mode="json")
