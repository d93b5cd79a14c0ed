"""Seed file loader for student profiles and scholarships.

A seed file is YAML with two top-level lists:

    students:
      - student_id: 1
        academic_level: Undergraduate
        ...
    scholarships:
      - scholarship_id: 10
        title: Women in STEM
        ...

Every record is validated before anything is written, so a bad file never
leaves the database half-seeded.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from app.config.exceptions import ConfigurationError
from app.domain.models import Scholarship, StudentProfile
from app.logging import get_logger
from app.persistence.database import get_session
from app.persistence.repositories import ProfileRepository, ScholarshipRepository

logger = get_logger(__name__, component="catalog")


class SeedDataError(ConfigurationError):
    """Raised when a seed file cannot be read or contains invalid records."""


@dataclass
class SeedData:
    """Validated contents of a seed file."""

    students: List[StudentProfile] = field(default_factory=list)
    scholarships: List[Scholarship] = field(default_factory=list)


@dataclass
class SeedResult:
    """Counts of records written by seed_database."""

    students_written: int = 0
    scholarships_written: int = 0


def load_seed_file(path: Path) -> SeedData:
    """
    Read and validate a seed file.

    Args:
        path: YAML file with ``students`` and ``scholarships`` lists

    Returns:
        SeedData with validated domain models

    Raises:
        SeedDataError: If the file is missing, unparsable or has invalid records
    """
    if not path.exists():
        raise SeedDataError(
            f"Seed file not found: {path}",
            suggestions=["See docs/sample_catalog.yaml for an example seed file"],
        )

    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SeedDataError(
            f"Failed to parse seed file {path}: {e}",
            suggestions=["Check YAML syntax and indentation"],
        )
    except OSError as e:
        raise SeedDataError(f"Failed to read seed file {path}: {e}")

    return parse_seed_dict(raw)


def parse_seed_dict(raw: Optional[Dict[str, Any]]) -> SeedData:
    """
    Validate a parsed seed mapping into domain models.

    Args:
        raw: Mapping with optional ``students`` and ``scholarships`` lists

    Returns:
        SeedData with validated domain models

    Raises:
        SeedDataError: With one error line per invalid record
    """
    if raw is None:
        return SeedData()
    if not isinstance(raw, dict):
        raise SeedDataError("Seed file must contain a mapping at the top level")

    errors: List[str] = []
    students = _parse_records(raw.get("students") or [], StudentProfile, "students", errors)
    scholarships = _parse_records(
        raw.get("scholarships") or [], Scholarship, "scholarships", errors
    )

    _check_duplicates([s.student_id for s in students], "students", "student_id", errors)
    _check_duplicates(
        [s.scholarship_id for s in scholarships], "scholarships", "scholarship_id", errors
    )

    if errors:
        raise SeedDataError(
            "Seed data validation failed",
            errors=errors,
            suggestions=["Fix the listed records and run the seed command again"],
        )

    return SeedData(students=students, scholarships=scholarships)


def _parse_records(records: Any, model, section: str, errors: List[str]) -> list:
    if not isinstance(records, list):
        errors.append(f"'{section}' must be a list")
        return []

    parsed = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"{section}[{index}]: expected a mapping, got {type(record).__name__}")
            continue
        try:
            parsed.append(model.model_validate(record))
        except ValidationError as e:
            for item in e.errors():
                location = ".".join(str(loc) for loc in item["loc"]) or "record"
                errors.append(f"{section}[{index}].{location}: {item['msg']}")
    return parsed


def _check_duplicates(ids: List[int], section: str, key: str, errors: List[str]) -> None:
    seen = set()
    for record_id in ids:
        if record_id in seen:
            errors.append(f"{section}: duplicate {key} {record_id}")
        seen.add(record_id)


def seed_database(seed: SeedData) -> SeedResult:
    """
    Upsert seed records into the database in one transaction.

    Re-seeding the same file overwrites existing rows with the same ids.

    Raises:
        PersistenceError: If a write fails (nothing is committed)
    """
    result = SeedResult()

    with get_session() as session:
        profile_repo = ProfileRepository(session)
        scholarship_repo = ScholarshipRepository(session)

        for profile in seed.students:
            profile_repo.upsert(profile)
            result.students_written += 1

        for scholarship in seed.scholarships:
            scholarship_repo.upsert(scholarship)
            result.scholarships_written += 1

    logger.info(
        "Seed data written",
        extra={
            "event": "catalog.seed.completed",
            "students_written": result.students_written,
            "scholarships_written": result.scholarships_written,
        },
    )
    return result
