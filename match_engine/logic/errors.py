"""
Match engine exceptions.
"""


class MatchEngineError(Exception):
    """Base exception for match engine errors."""
    pass


class ConfigurationError(MatchEngineError):
    """Raised at startup when a signal registry or weight table is invalid."""
    pass


class InvalidArgument(MatchEngineError):
    """Raised when a caller passes bad pagination or an unknown option."""
    pass


class SubjectNotFound(MatchEngineError):
    """Raised when the subject of a recommendation request does not exist."""

    def __init__(self, subject_type: str, subject_id: str):
        self.subject_type = subject_type
        self.subject_id = subject_id
        super().__init__(f"{subject_type} not found: {subject_id}")
