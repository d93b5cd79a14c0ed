"""Abstract store interfaces the recommendation service depends on.

The SQL repositories in app.persistence implement these; tests may supply
in-memory implementations instead.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .models import MatchRecord, Recommendation, Scholarship, StudentProfile


class ProfileReader(ABC):
    """Read access to student profiles."""

    @abstractmethod
    def find_profile(self, student_id: int) -> Optional[StudentProfile]:
        """Return the student's profile, or None if absent."""


class CatalogReader(ABC):
    """Read access to the scholarship catalog."""

    @abstractmethod
    def find_approved_future(self, now: datetime) -> List[Scholarship]:
        """Return approved scholarships whose deadline is strictly after ``now``."""


class MatchWriter(ABC):
    """Write and read access to persisted match results."""

    @abstractmethod
    def delete_all(self, student_id: int) -> int:
        """Delete every match row for the student; return the count removed."""

    @abstractmethod
    def insert_many(self, records: List[MatchRecord]) -> List[MatchRecord]:
        """Insert fresh match rows; return them with match_id assigned."""

    @abstractmethod
    def query_ordered(self, student_id: int, now: datetime) -> List[Recommendation]:
        """Return the student's matches on approved, open scholarships, best first."""

    @abstractmethod
    def get_by_id(self, match_id: int) -> Optional[MatchRecord]:
        """Return a single match row, or None if absent."""
