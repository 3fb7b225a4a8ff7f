"""
Typed failures raised by the itinerary, budget and sharing services.
"""


class GlobeTrotterError(Exception):
    """Base class for domain failures."""

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__
        super().__init__(self.message)


class NotFound(GlobeTrotterError):
    """Referenced entity does not exist."""


class ScopeMismatch(GlobeTrotterError):
    """Entity exists but belongs to a different parent."""


class InvalidRange(GlobeTrotterError):
    """Date or value ordering violated."""


class Unauthorized(GlobeTrotterError):
    """Caller lacks ownership or visibility rights."""


class Conflict(GlobeTrotterError):
    """Uniqueness violation, retry with a fresh value."""
