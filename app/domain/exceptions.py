"""Domain exceptions for the org chart application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from datetime import datetime
from typing import Any


class OrgChartException(Exception):
    """Base exception for all org chart application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, details and errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context merged into the response body.
        errors: Field name to list of messages (form validation).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
            errors: Optional field-keyed validation messages.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.errors = errors or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response envelope: success flag, message, optional errors and details."""
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        body.update(self.details)
        return body


class ValidationException(OrgChartException):
    """Raised when input validation fails (uniqueness, format, enum membership).

    Either a single field/message pair or a full errors map may be given.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        """Initialize with message and optional field name or errors map.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation; message is filed under it.
            errors: Optional field to messages map (takes precedence over field).
        """
        if errors is None and field:
            errors = {field: [message]}
        super().__init__(message, "VALIDATION_ERROR", errors=errors)
        self.field = field


class InvalidCredentialsException(OrgChartException):
    """Raised when login credentials do not match an account."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message, "INVALID_CREDENTIALS")


class AccountInactiveException(OrgChartException):
    """Raised when a disabled account tries to log in."""

    def __init__(
        self, message: str = "Account is inactive. Please contact the administrator."
    ) -> None:
        super().__init__(message, "ACCOUNT_INACTIVE")


class SessionConflictException(OrgChartException):
    """Raised when login finds another live session and force_logout was not requested.

    Carries the existing session's device details so the client can ask the
    user to confirm a takeover.
    """

    def __init__(
        self,
        device_name: str | None,
        ip_address: str | None,
        last_activity: datetime | None,
    ) -> None:
        """Initialize with the existing session's device details.

        Args:
            device_name: Device label recorded on the existing session.
            ip_address: Client IP recorded on the existing session.
            last_activity: Last time the existing session was used.
        """
        super().__init__(
            "This account is already logged in on another device.",
            "SESSION_CONFLICT",
            {
                "requires_force_logout": True,
                "existing_session": {
                    "device_name": device_name,
                    "ip_address": ip_address,
                    "last_activity": (
                        last_activity.isoformat() if last_activity else None
                    ),
                },
            },
        )


class HasChildrenException(OrgChartException):
    """Raised when deleting a unit that still has child units."""

    def __init__(self, unit_id: int, child_count: int) -> None:
        super().__init__(
            "Unit cannot be deleted because it still has child units.",
            "HAS_CHILDREN",
            {"child_count": child_count},
        )
        self.unit_id = unit_id


class ProtectedAccountException(OrgChartException):
    """Raised when an operation targets an admin account (assign, update, delete)."""

    def __init__(self, action: str) -> None:
        """Initialize with the attempted action.

        Args:
            action: What was attempted, e.g. 'assigned to a unit', 'deleted'.
        """
        super().__init__(
            f"Users with the admin role cannot be {action}.",
            "PROTECTED_ACCOUNT",
        )


class AuthenticationException(OrgChartException):
    """Raised when authentication fails (missing, invalid, or revoked token)."""

    def __init__(self, message: str = "Unauthenticated") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(OrgChartException):
    """Raised when the user's role is not allowed for the operation."""

    def __init__(
        self,
        required_roles: list[str] | None = None,
        your_role: str | None = None,
        message: str = "Forbidden. You do not have access to this resource.",
    ) -> None:
        """Initialize with the roles the route accepts and the caller's role.

        Args:
            required_roles: Roles that may call the route.
            your_role: The caller's current role.
            message: Human-readable message.
        """
        details: dict[str, Any] = {}
        if required_roles is not None:
            details["required_roles"] = required_roles
        if your_role is not None:
            details["your_role"] = your_role
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class ResourceNotFoundException(OrgChartException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'unit', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class TooManyAttemptsException(OrgChartException):
    """Raised when an identifier exceeded the failed-login allowance."""

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            f"Too many login attempts. Please try again in {retry_after} seconds.",
            "TOO_MANY_ATTEMPTS",
            errors={"email": ["Too many login attempts."]},
        )
        self.retry_after = retry_after


class EmailDeliveryException(OrgChartException):
    """Raised when the mail backend could not deliver a message."""

    def __init__(self, recipient: str, reason: str) -> None:
        super().__init__(
            "Failed to send email. Please try again later.",
            "EMAIL_DELIVERY_ERROR",
        )
        self.recipient = recipient
        self.reason = reason

