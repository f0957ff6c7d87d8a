"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; the API layer maps them to status codes:
ValidationError -> 400, NotFoundError -> 404, StoreError -> 500.
Messages are short and safe to show to a user.
"""


class ValidationError(ValueError):
    """Missing or malformed input. Raised before any write happens."""


class NotFoundError(LookupError):
    """A referenced account or transaction does not exist."""


class StoreError(RuntimeError):
    """The database rejected or failed a read or write."""
