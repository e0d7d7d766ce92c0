class MonkeyBrainError(Exception):
    """Base class for network errors."""


class ShapeMismatchError(MonkeyBrainError, ValueError):
    """Raised when a state vector does not match the size of its layer."""

    def __init__(self, what: str, expected: int, actual: int):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} has {actual} values, layer has {expected} neurons")


class InvalidTopologyError(MonkeyBrainError, ValueError):
    """Raised when layer dimensions do not describe a network."""
