"""
Role definitions for TalentFlow operators.

Roles are resolved by the identity provider; this service only reads them.
"""

from typing import Optional


class Roles:
    """Operator roles."""
    ADMIN = "admin"
    CUSTOMER = "customer"

    # All roles list for validation
    ALL = [ADMIN, CUSTOMER]

    # admin: sees every tenant's jobs and candidates
    # customer: owns jobs and sees only their own records


def normalize_role(role: Optional[str]) -> str:
    """Lower-case and trim a role string; missing roles become customer."""
    value = (role or "").strip().lower()
    return value or Roles.CUSTOMER


def check_is_admin(user_role: Optional[str]) -> bool:
    """Check if user is admin."""
    return normalize_role(user_role) == Roles.ADMIN
