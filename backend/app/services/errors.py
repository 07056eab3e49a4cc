"""Service-level exceptions.

Not-found and ownership failures are plain ``ValueError`` (routers map them to
404). Rejected input uses the subclass below so routers can answer 400 instead.
"""


class InvalidInputError(ValueError):
    """Raised when a request is well-formed but its content is not acceptable."""
