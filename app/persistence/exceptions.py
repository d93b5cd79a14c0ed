"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can catch
every storage failure with a single except clause. None of them are retried.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors.

    Raised directly when the database is unreachable or a query fails.
    """

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - Session requested before init_database()
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint violation occurs.

    Examples:
    - Two rows for the same (student, scholarship) pair
    - Match row referencing a missing profile or scholarship
    """

    pass
