"""Domain-level exception primitives with stable machine-readable codes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class DomainError(Exception):
    """Ledger operation error with stable code and HTTP mapping."""

    code: str
    http_status: int
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class Unauthorized(DomainError):
    """Caller lacks the role required for a mutation."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="UNAUTHORIZED", http_status=403, message=message, details=details)


class NotFound(DomainError):
    """Referenced product id does not exist."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "PRODUCT_NOT_FOUND",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, http_status=404, message=message, details=details)


class InvalidInput(DomainError):
    """Empty or malformed fields."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="INVALID_INPUT", http_status=422, message=message, details=details)


class LastAdmin(DomainError):
    """Revoking ADMIN would leave the ledger without an administrator."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="LAST_ADMIN", http_status=409, message=message, details=details)
