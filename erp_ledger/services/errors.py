"""Service-layer exceptions. All are ValueErrors so callers can catch broadly."""


class NotFoundError(ValueError):
    """The requested record does not exist."""
