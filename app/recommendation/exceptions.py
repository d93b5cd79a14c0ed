"""Exceptions raised by the recommendation service.

Each exception carries the status code it maps to when surfaced to a caller
as an error envelope. Disqualification is not an error and has no exception.
"""

from typing import Any, Dict

from app.persistence.exceptions import PersistenceError


class RecommendationError(Exception):
    """Base exception for recommendation failures visible to the caller."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProfileNotFoundError(RecommendationError):
    """Raised when the student has no profile to match against."""

    status_code = 404

    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__("Student profile not found")


class MatchNotFoundError(RecommendationError):
    """Raised when a match id does not exist (or was purged by a recompute)."""

    status_code = 404

    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__("Recommendation not found")


class MatchAccessDeniedError(RecommendationError):
    """Raised when a student asks for a match owned by another student."""

    status_code = 403

    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__("Unauthorized access")


class ExplanationUnavailableError(RecommendationError):
    """Raised when a match has no matched criteria to explain."""

    status_code = 400

    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__("No explanation data available for this recommendation")


def error_envelope(error: Exception) -> Dict[str, Any]:
    """Build the single error object returned to callers.

    Args:
        error: Exception raised while serving a request

    Returns:
        Dict with ``error`` (message) and ``status`` (HTTP-style code)
    """
    if isinstance(error, RecommendationError):
        return {"error": error.message, "status": error.status_code}
    if isinstance(error, PersistenceError):
        return {"error": "Storage unavailable", "status": 500}
    return {"error": "An unexpected error occurred", "status": 500}
