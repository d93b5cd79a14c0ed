"""Interest taxonomy mapping coarse interest categories to fields of study.

The taxonomy is a static, in-process table. Configuration may add categories
or replace the field list of a built-in category.
"""

from typing import Dict, FrozenSet, Iterable, Mapping, Optional

DEFAULT_INTEREST_CATEGORIES: Dict[str, tuple] = {
    "technology": (
        "Computer Science",
        "Software Engineering",
        "Information Technology",
        "Data Science",
        "Cybersecurity",
        "Artificial Intelligence",
    ),
    "engineering": (
        "Civil Engineering",
        "Mechanical Engineering",
        "Electrical Engineering",
        "Chemical Engineering",
        "Software Engineering",
    ),
    "health": (
        "Medicine",
        "Nursing",
        "Pharmacy",
        "Public Health",
        "Dentistry",
    ),
    "business": (
        "Business Administration",
        "Accounting",
        "Finance",
        "Economics",
        "Marketing",
    ),
    "natural_sciences": (
        "Biology",
        "Chemistry",
        "Physics",
        "Mathematics",
        "Environmental Science",
    ),
    "social_sciences": (
        "Psychology",
        "Sociology",
        "Political Science",
        "International Relations",
        "Economics",
    ),
    "arts": (
        "Fine Arts",
        "Music",
        "Literature",
        "Architecture",
        "Design",
    ),
    "education": (
        "Education",
        "Early Childhood Education",
        "Special Education",
    ),
    "law": (
        "Law",
        "Criminology",
    ),
    "agriculture": (
        "Agriculture",
        "Agricultural Economics",
        "Food Science",
        "Environmental Science",
    ),
}


class InterestTaxonomy:
    """Case-insensitive lookup from interest category to related fields."""

    def __init__(self, overrides: Optional[Mapping[str, Iterable[str]]] = None):
        """Build the taxonomy from the built-in table plus optional overrides.

        Args:
            overrides: Category -> fields mapping; replaces built-in entries with the same key
        """
        merged: Dict[str, Iterable[str]] = dict(DEFAULT_INTEREST_CATEGORIES)
        if overrides:
            merged.update(overrides)

        self._categories: Dict[str, FrozenSet[str]] = {
            key.strip().lower(): frozenset(f.strip().lower() for f in fields if f and f.strip())
            for key, fields in merged.items()
        }

    def lookup(self, interest: Optional[str]) -> FrozenSet[str]:
        """Return the lower-cased fields for an interest, or an empty set if unknown."""
        if not interest:
            return frozenset()
        return self._categories.get(interest.strip().lower(), frozenset())
