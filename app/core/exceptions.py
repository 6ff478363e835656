"""
Exceptions raised by the analysis engine.

Only NotFoundError and ForbiddenError ever reach a caller. The other two
describe degradations that are logged and absorbed where they happen.
"""


class AnalysisError(Exception):
    """Base class for analysis engine errors."""


class NotFoundError(AnalysisError):
    """The test attempt or its test does not exist."""


class ForbiddenError(AnalysisError):
    """The requesting user does not own the test attempt."""


class ClassificationDegraded(AnalysisError):
    """The semantic classifier failed and the rule engine was used instead."""


class PersistenceConflict(AnalysisError):
    """Another writer already stored a report for the same attempt."""
