"""Role catalogue and the role sets that gate each ledger mutation."""
from __future__ import annotations

from enum import Enum
from typing import Iterable


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANUFACTURER = "MANUFACTURER"
    DISTRIBUTOR = "DISTRIBUTOR"
    RETAILER = "RETAILER"
    QUALITY_INSPECTOR = "QUALITY_INSPECTOR"


MANAGE_ROLES: frozenset[Role] = frozenset({Role.ADMIN})
REGISTER_PRODUCT_ROLES: frozenset[Role] = frozenset({Role.MANUFACTURER, Role.ADMIN})
ADD_STEP_ROLES: frozenset[Role] = frozenset(
    {Role.MANUFACTURER, Role.DISTRIBUTOR, Role.RETAILER, Role.ADMIN}
)
ADD_REPORT_ROLES: frozenset[Role] = frozenset({Role.QUALITY_INSPECTOR, Role.ADMIN})

# UI capability flags derived from the role set of the current identity.
UI_CAPABILITIES: dict[str, frozenset[Role]] = {
    "canManageRoles": MANAGE_ROLES,
    "canRegisterProducts": REGISTER_PRODUCT_ROLES,
    "canAddSteps": ADD_STEP_ROLES,
    "canAddReports": ADD_REPORT_ROLES,
}


def parse_role(value: str | Role) -> Role:
    """Parse ``MANUFACTURER``, ``manufacturer`` or the legacy ``MANUFACTURER_ROLE``."""
    if isinstance(value, Role):
        return value
    name = (value or "").strip().upper()
    if name.endswith("_ROLE"):
        name = name[: -len("_ROLE")]
    try:
        return Role(name)
    except ValueError:
        raise ValueError(f"Unknown role: {value!r}") from None


def normalize_identity(identity: str | None) -> str:
    """Identities compare case-insensitively (hex account addresses)."""
    normalized = (identity or "").strip().lower()
    if not normalized:
        raise ValueError("Identity must not be empty")
    return normalized


def holds_any(roles: Iterable[Role], allowed: Iterable[Role]) -> bool:
    return not set(roles).isdisjoint(allowed)


def get_ui_capabilities(roles: Iterable[Role]) -> dict[str, bool]:
    held = set(roles)
    return {key: holds_any(held, allowed) for key, allowed in UI_CAPABILITIES.items()}


def describe_roles(roles: Iterable[Role]) -> str:
    names = sorted(role.value for role in roles)
    return ", ".join(names) if names else "none"
