"""
qualflow.exceptions - Custom exception classes.

All QualFlow-specific exceptions inherit from QualFlowError.
"""


class QualFlowError(Exception):
    """Base exception for all QualFlow errors."""

    pass


class ConfigError(QualFlowError):
    """Configuration loading or validation error."""

    pass


class NoCategoriesError(QualFlowError):
    """Open coding produced no categories to build a theory from."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No categories found. Please ensure your codes can form at least one category."
        )


class MissingReferenceError(QualFlowError):
    """A referenced entity is not present in the working set."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} not found: {name}")
