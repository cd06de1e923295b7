class AthleteUnknownException(Exception):
    """Base exception for the round engine."""
    pass


class DataFetchError(AthleteUnknownException):
    """Raised when round data or stats cannot be fetched."""
    pass


class SubmissionError(AthleteUnknownException):
    """Raised when a round result could not be submitted."""
    pass


class PersistenceError(AthleteUnknownException):
    """Raised when the durable key-value store fails to read or write."""
    pass


class InputValidationError(AthleteUnknownException):
    """Raised when a guess is empty after normalization."""
    pass


class InvalidTileError(AthleteUnknownException):
    """Raised when a tile index is out of range."""
    pass


class InvalidSportError(AthleteUnknownException):
    """Raised when a sport is not supported."""
    pass
