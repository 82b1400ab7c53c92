"""
QuizBuzz exceptions.

Judge input never raises; these cover programming errors and bad settings.
"""


class QuizBuzzException(Exception):
    """Base class for all QuizBuzz errors."""
    pass


class InvalidPhaseTransition(QuizBuzzException):
    """A round tried to move to a phase that does not follow the current one."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move from {current.value} to {requested.value}")


class SettingsError(QuizBuzzException):
    """The settings file could not be read or failed validation."""
    pass
