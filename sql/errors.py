"""
======================================
Exceptions raised by the SQL builders.
======================================

All are synchronous build-time errors raised to the caller of a builder
method or of render(). None of them is retried or recovered internally.
"""


class QueryBuildError(Exception):
    """Exception raised when a statement cannot be built from its state."""
    pass


class MissingTargetError(QueryBuildError):
    """Raised when an INSERT is rendered without a target table."""
    pass


class EmptyRowError(QueryBuildError):
    """Raised when an accumulated value row holds no values."""
    pass


class ConflictingValueSourceError(QueryBuildError):
    """Raised when row values and a SELECT source are mixed on one INSERT."""
    pass
