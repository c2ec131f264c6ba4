"""
Caller identity and role checks.

A Principal is passed explicitly into every catalog service call; the
services enforce roles themselves instead of trusting the UI to hide links.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from vendhub.core.exceptions import AuthorizationError

ADMIN_ROLE = "admin"
OPERATOR_ROLE = "operator"


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: Optional[str] = None
    company_id: Optional[str] = None
    is_admin: bool = False
    is_operator: bool = False
    access_token: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any], access_token: Optional[str] = None) -> "Principal":
        """Build a principal from access token claims (top-level or app_metadata)."""
        meta = claims.get("app_metadata") or {}
        roles = set(_as_list(meta.get("roles")) + _as_list(meta.get("role")))
        roles.update(_as_list(claims.get("roles")))
        roles.update(_as_list(claims.get("user_role")))
        is_admin = ADMIN_ROLE in roles
        return cls(
            user_id=str(claims["sub"]),
            email=claims.get("email"),
            company_id=meta.get("company_id") or claims.get("company_id"),
            is_admin=is_admin,
            # admins can do everything operators can
            is_operator=is_admin or OPERATOR_ROLE in roles,
            access_token=access_token,
        )


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return [str(v) for v in value]
    return [str(value)]


def require_admin(principal: Principal, operation: str) -> None:
    if not principal.is_admin:
        raise AuthorizationError(operation, "global catalog")


def require_operator(principal: Principal, operation: str) -> None:
    if not principal.is_operator:
        raise AuthorizationError(operation, "company catalog")


def require_company_access(principal: Principal, company_id: str, operation: str) -> None:
    """Operators act on their own company only; admins on any company."""
    require_operator(principal, operation)
    if principal.is_admin:
        return
    if not principal.company_id or principal.company_id != company_id:
        raise AuthorizationError(operation, f"company {company_id}")
