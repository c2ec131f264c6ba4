"""
Catalog exceptions.

Every failure a catalog service can raise is a CatalogError. The API layer
maps each subclass to an HTTP status (see vendhub.core.errors).
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "CATALOG_ERROR"
        self.details = details or {}


class ValidationError(CatalogError):
    """Raised when a required field is missing or a value is out of range."""

    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None},
        )


class NotFoundError(CatalogError):
    """Raised when a row does not exist (or a write matched zero rows)."""

    status_code = 404

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            message=f"{entity_type} with id '{entity_id}' not found",
            code="NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class AlreadyImportedError(CatalogError):
    """Raised when a global product is already in the company catalog."""

    status_code = 409
    default_message = "Product already exists in company catalog"

    def __init__(self, product_id: Any, company_id: Any):
        super().__init__(
            message=self.default_message,
            code="ALREADY_IMPORTED",
            details={"product_id": str(product_id), "company_id": str(company_id)},
        )

    def friendly_message(self) -> str:
        return "This product is already in your company catalog."


class DependencyConflictError(CatalogError):
    """Raised when a delete is blocked by rows that still reference the target."""

    status_code = 409

    def __init__(self, entity_type: str, entity_id: Any, counts: Dict[str, int]):
        blocking = {name: n for name, n in counts.items() if n > 0}
        lines = "\n".join(f"{n} {name.replace('_', ' ')}" for name, n in blocking.items())
        super().__init__(
            message=(
                f"Cannot delete this {entity_type} because it has dependencies:\n{lines}\n\n"
                "Please remove or reassign these items first."
            ),
            code="DEPENDENCY_CONFLICT",
            details={"entity_type": entity_type, "entity_id": str(entity_id), "counts": counts},
        )
        self.counts = counts


class ActivationError(CatalogError):
    """Raised when a company product would be active without a base price."""

    status_code = 409

    def __init__(self, company_product_id: Any):
        super().__init__(
            message="Set base price before activating.",
            code="PRICE_REQUIRED",
            details={"company_product_id": str(company_product_id)},
        )


class AuthorizationError(CatalogError):
    """Raised when the principal may not perform an operation."""

    status_code = 403

    def __init__(self, operation: str, resource: Optional[str] = None):
        super().__init__(
            message=f"Not authorized to perform '{operation}'"
            + (f" on '{resource}'" if resource else ""),
            code="AUTHORIZATION_ERROR",
            details={"operation": operation, "resource": resource},
        )


class BackendError(CatalogError):
    """Raised when the storage backend rejects a request or cannot be reached."""

    status_code = 502

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=code or "BACKEND_ERROR", details=details)

    @property
    def is_unique_violation(self) -> bool:
        text = self.message.lower()
        return self.code == "23505" or "unique" in text or "duplicate key" in text

    def friendly_message(self) -> str:
        """Map well-known backend failures to text an end user can act on."""
        text = self.message.lower()
        if "foreign key" in text:
            return (
                "This record is still used by other records. "
                "Please remove dependent records first."
            )
        if "permission" in text or "policy" in text or "jwt" in text:
            return (
                "You have insufficient privileges for this action. "
                "Please contact an administrator."
            )
        if any(s in text for s in ("network", "fetch", "connect", "timeout", "timed out")):
            return "Network error. Please check connectivity and try again."
        return f"Request failed: {self.message or 'Unknown error occurred'}"
