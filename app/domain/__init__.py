"""Domain layer: enums, exceptions and pure tree rules.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import DEFAULT_ROLE, UnitType, UserRole
from app.domain.exceptions import (
    AccountInactiveException,
    AuthenticationException,
    AuthorizationException,
    EmailDeliveryException,
    HasChildrenException,
    InvalidCredentialsException,
    OrgChartException,
    ProtectedAccountException,
    ResourceNotFoundException,
    SessionConflictException,
    TooManyAttemptsException,
    ValidationException,
)

__all__ = [
    "DEFAULT_ROLE",
    "UnitType",
    "UserRole",
    "AccountInactiveException",
    "AuthenticationException",
    "AuthorizationException",
    "EmailDeliveryException",
    "HasChildrenException",
    "InvalidCredentialsException",
    "OrgChartException",
    "ProtectedAccountException",
    "ResourceNotFoundException",
    "SessionConflictException",
    "TooManyAttemptsException",
    "ValidationException",
]
