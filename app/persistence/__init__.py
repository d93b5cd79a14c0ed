"""Persistence layer for profiles, the scholarship catalog, and match results.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - ProfileRepository: student profile reads and upserts
    - ScholarshipRepository: catalog reads (candidate selection) and upserts
    - MatchResultRepository: delete/insert/query of match rows

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from app.persistence import init_database, get_session, ProfileRepository
    >>>
    >>> init_database("sqlite:///./data/scholarship_matcher.db")
    >>> with get_session() as session:
    ...     profile = ProfileRepository(session).find_profile(42)
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import MatchResultRepository, ProfileRepository, ScholarshipRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "ProfileRepository",
    "ScholarshipRepository",
    "MatchResultRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
