"""Builders for domain objects used across tests.

Defaults describe the Kenyan Computer Science undergraduate used throughout
the scoring examples, evaluated against a fixed instant.
"""

from datetime import datetime, timezone

from app.domain.models import Scholarship, StudentProfile

NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
FUTURE_DEADLINE = datetime(2026, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def make_profile(**overrides) -> StudentProfile:
    fields = {
        "student_id": 1,
        "country": "Kenya",
        "academic_level": "Undergraduate",
        "field_of_study": "Computer Science",
        "gpa_min": 3.2,
        "gpa_max": 3.6,
        # 21 on NOW
        "date_of_birth": "2005-03-10",
    }
    fields.update(overrides)
    return StudentProfile(**fields)


def make_scholarship(**overrides) -> Scholarship:
    fields = {
        "scholarship_id": 10,
        "title": "Test Scholarship",
        "organization_name": "Test Foundation",
        "status": "approved",
        "deadline": FUTURE_DEADLINE,
        "education_level": "Undergraduate",
        "fields_of_study": ["Computer Science"],
    }
    fields.update(overrides)
    return Scholarship(**fields)
