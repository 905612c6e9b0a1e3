"""Storage error taxonomy shared by every repository adapter and the API layer."""


class StoreError(Exception):
    """Base class for repository errors."""


class NotFound(StoreError):
    """A lookup missed. Callers treat this as a normal outcome."""


class Conflict(StoreError):
    """A uniqueness constraint was violated on create."""


class StoreUnavailable(StoreError):
    """The backing datastore could not be reached or timed out."""


class InvalidInput(StoreError):
    """A request carried malformed data. Rejected before reaching storage."""
