from typing import Any


class NotFound(KeyError):
    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.key = key


class EmptyCollection(KeyError):
    def __init__(self, message: str = "pop from an empty set") -> None:
        super().__init__(message)


class InvariantViolation(Exception):
    """A table invariant does not hold. Indicates a bug, never recovered from."""
