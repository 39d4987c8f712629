"""Domain errors raised by the binding and metrics services.

Each error carries a short, user-displayable message. The API layer maps them
to HTTP status codes; nothing here knows about HTTP.
"""


class BindingServiceError(Exception):
    """Base class for all binding/metrics domain errors."""

    default_message = "request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(BindingServiceError):
    """The supplied trader code is empty or malformed."""

    default_message = "invalid trader code"


class NotFoundError(BindingServiceError):
    """No trader (or binding) matches the lookup."""

    default_message = "trader not found"


class DuplicateRequestError(BindingServiceError):
    """The investor already holds a binding, pending or approved."""

    default_message = "binding request already exists"


class InvalidTransitionError(BindingServiceError):
    """The binding is not in a state that allows the requested transition."""

    default_message = "binding cannot change to the requested status"


class TransportError(BindingServiceError):
    """The backing store was unreachable or the query failed."""

    default_message = "data store unavailable"
