"""Domain enumerations for the org chart application.

Enums represent fixed sets of domain values (roles and unit types).
"""

from enum import Enum


class UserRole(str, Enum):
    """Authorization tier of a user.

    Derived from unit membership: an assigned user carries its unit's role,
    an unassigned user carries SDM. ADMIN is never derived and never assignable.
    """

    ADMIN = "admin"
    DEKAN = "dekan"
    WADEK = "wadek"
    UNIT = "unit"
    SDM = "sdm"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [role.value for role in cls]


class UnitType(str, Enum):
    """Organizational classification of a unit (independent of its role)."""

    WADEK_I = "wadek_i"
    WADEK_II = "wadek_ii"
    UNIT = "unit"
    SDM = "sdm"

    @classmethod
    def values(cls) -> list[str]:
        return [unit_type.value for unit_type in cls]


DEFAULT_ROLE = UserRole.SDM
