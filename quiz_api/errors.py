"""Error taxonomy for question loading, persistence and session flow."""


class QuizError(Exception):
    """Base class for quiz errors."""


class LoadError(QuizError):
    """Question source is unreachable or malformed."""


class PersistenceError(QuizError):
    """Progress snapshot could not be written or read."""


class EmptyResultError(QuizError):
    """Active filters produced no questions."""


class SessionStateError(QuizError):
    """Operation is not valid in the current session state."""


class InvalidSelectionError(QuizError):
    """Submitted selection has the wrong shape for the question variant."""
