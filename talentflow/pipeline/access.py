"""
Access scope resolution.

An operator either sees only the records they own or every record. The scope
is computed from the role before each load and passed explicitly to the
components that query.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from talentflow.core.permissions import check_is_admin, normalize_role


class AccessScope(str, Enum):
    OWNED = "owned"
    GLOBAL = "global"

    @property
    def restrict_to_owner(self) -> bool:
        return self is AccessScope.OWNED


@dataclass(frozen=True)
class Operator:
    """The read-only identity fact for the current session."""

    operator_id: UUID
    role: str

    @property
    def scope(self) -> AccessScope:
        return resolve_access_scope(self.role)


def resolve_access_scope(role: Optional[str]) -> AccessScope:
    """Admins get the global scope; every other role is restricted to owned records."""
    if check_is_admin(role):
        return AccessScope.GLOBAL
    return AccessScope.OWNED


def owner_filter(operator_id: Any, scope: AccessScope) -> Dict[str, Any]:
    """Store filter for the given scope (empty when unrestricted)."""
    if scope.restrict_to_owner:
        return {"owner_id": operator_id}
    return {}


def operator_from_claims(claims: Dict[str, Any]) -> Operator:
    """Build an Operator from decoded session claims. Raises ValueError on bad ids."""
    return Operator(operator_id=UUID(str(claims["operator_id"])), role=normalize_role(claims.get("role")))
