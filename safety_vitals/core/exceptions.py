"""
Platform-wide exception hierarchy.

Services raise these types; blueprints register one handler per type and
get consistent HTTP status codes everywhere (see register_error_handlers).

Usage:
    from safety_vitals.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Action", resource_id=action_id)
    raise ValidationError("title is required", details={"title": "required"})
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist within the given scope.

    Used for BOTH genuinely missing records AND cross-organization access
    attempts, so a 404 never confirms that another tenant's record exists.

    Args:
        resource: Human-readable entity name (e.g. "Action", "Survey").
        resource_id: The PK that was looked up. Included in logs, not in HTTP response.
        org_id: Optional — the scope that was enforced. For debug logging only.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        org_id: str | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.org_id = org_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        if org_id is not None:
            msg += f" (org={org_id})"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when a request body field is missing or malformed.

    Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an operation would violate a unique key. Maps to HTTP 409."""

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field}={value!r} already exists")


class AuthenticationMissing(Exception):
    """Raised when a route needs an admin session and none was presented. Maps to 401."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when an integration is called without its credentials. Maps to 500.

    Args:
        message: Short error shown to the caller.
        details: Longer explanation (which env vars are missing).
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        self.details = details
        super().__init__(message)


class UpstreamError(Exception):
    """Raised when the database, the mail relay or the inference endpoint fails.

    Maps to HTTP 500; the upstream message is forwarded to the caller verbatim.

    Args:
        message: Error text returned as ``error``.
        details: Upstream payload or message returned as ``details``.
        status_code: Upstream HTTP status when there was one.
    """

    def __init__(self, message: str, details=None, status_code: int | None = None) -> None:
        self.details = details
        self.status_code = status_code
        super().__init__(message)
