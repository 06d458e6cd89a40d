"""RoleManager use-cases: identity to role grants, gating every ledger mutation."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..domain_errors import DomainError, InvalidInput, LastAdmin, Unauthorized
from ..models import RoleGrant
from ..services.events import ROLE_GRANTED, ROLE_REVOKED, now_utc, record_event
from ..services.roles import (
    MANAGE_ROLES,
    Role,
    describe_roles,
    holds_any,
    normalize_identity,
    parse_role,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleMember:
    identity: str
    roles: frozenset[Role]


def _identity_or_invalid(identity: str | None) -> str:
    try:
        return normalize_identity(identity)
    except ValueError as exc:
        raise InvalidInput(str(exc)) from exc


def parse_role_or_invalid(role: str | Role) -> Role:
    try:
        return parse_role(role)
    except ValueError as exc:
        raise InvalidInput(str(exc), details={"role": str(role)}) from exc


def has_role(db: Session, role: str | Role, identity: str) -> bool:
    parsed = parse_role_or_invalid(role)
    normalized = _identity_or_invalid(identity)
    return db.query(RoleGrant.id).filter(
        RoleGrant.identity == normalized,
        RoleGrant.role == parsed.value,
    ).first() is not None


def roles_of(db: Session, identity: str) -> frozenset[Role]:
    """All roles held by an identity in one query."""
    normalized = _identity_or_invalid(identity)
    rows = db.query(RoleGrant.role).filter(RoleGrant.identity == normalized).all()
    return frozenset(Role(row[0]) for row in rows)


def get_user_count(db: Session) -> int:
    """Distinct identities holding at least one role."""
    return int(db.query(func.count(func.distinct(RoleGrant.identity))).scalar() or 0)


def list_members(db: Session) -> list[RoleMember]:
    rows = db.query(RoleGrant.identity, RoleGrant.role).order_by(RoleGrant.identity.asc()).all()
    grouped: dict[str, set[Role]] = {}
    for identity, role in rows:
        grouped.setdefault(identity, set()).add(Role(role))
    return [RoleMember(identity=identity, roles=frozenset(roles)) for identity, roles in grouped.items()]


def require_any_role(db: Session, *, caller: str | None, allowed: Iterable[Role], action: str) -> str:
    """Return the normalized caller or raise Unauthorized."""
    allowed = frozenset(allowed)
    try:
        identity = normalize_identity(caller)
    except ValueError:
        raise Unauthorized(f"{action} requires an authenticated caller") from None

    held = roles_of(db, identity)
    if not holds_any(held, allowed):
        logger.warning("Denied %s for %s (holds %s)", action, identity, describe_roles(held))
        raise Unauthorized(
            f"{action} requires one of: {describe_roles(allowed)}",
            details={"caller": identity, "required": sorted(role.value for role in allowed)},
        )
    return identity


def bootstrap_admin(db: Session, deployer: str, *, at: datetime | None = None) -> bool:
    """Grant ADMIN to the deploying identity; no-op when already granted."""
    identity = _identity_or_invalid(deployer)
    if has_role(db, Role.ADMIN, identity):
        return False

    db.add(RoleGrant(identity=identity, role=Role.ADMIN.value, granted_by=identity, granted_at=at or now_utc()))
    record_event(
        db,
        action=ROLE_GRANTED,
        actor=identity,
        details={"role": Role.ADMIN.value, "identity": identity, "bootstrap": True},
        at=at,
    )
    db.commit()
    logger.info("Bootstrapped ADMIN for deployer %s", identity)
    return True


def grant_role_use_case(
    *,
    db: Session,
    role: str | Role,
    identity: str,
    caller: str,
    at: datetime | None = None,
) -> bool:
    """Grant role; returns False when the identity already held it."""
    admin = require_any_role(db, caller=caller, allowed=MANAGE_ROLES, action="grantRole")
    parsed = parse_role_or_invalid(role)
    target = _identity_or_invalid(identity)

    if has_role(db, parsed, target):
        return False

    db.add(RoleGrant(identity=target, role=parsed.value, granted_by=admin, granted_at=at or now_utc()))
    record_event(
        db,
        action=ROLE_GRANTED,
        actor=admin,
        details={"role": parsed.value, "identity": target},
        at=at,
    )
    db.commit()
    logger.info("Granted %s to %s by %s", parsed.value, target, admin)
    return True


def revoke_role_use_case(
    *,
    db: Session,
    role: str | Role,
    identity: str,
    caller: str,
    at: datetime | None = None,
) -> bool:
    """Revoke role; returns False when the identity did not hold it."""
    admin = require_any_role(db, caller=caller, allowed=MANAGE_ROLES, action="revokeRole")
    parsed = parse_role_or_invalid(role)
    target = _identity_or_invalid(identity)

    grant = db.query(RoleGrant).filter(
        RoleGrant.identity == target,
        RoleGrant.role == parsed.value,
    ).first()
    if grant is None:
        return False

    if parsed is Role.ADMIN:
        admin_count = db.query(func.count(RoleGrant.id)).filter(RoleGrant.role == Role.ADMIN.value).scalar() or 0
        if admin_count <= 1:
            raise LastAdmin(
                "Cannot revoke ADMIN from the last administrator",
                details={"identity": target},
            )
        if target == admin:
            raise DomainError(
                code="ADMIN_SELF_REVOKE",
                http_status=409,
                message="Administrators cannot revoke their own ADMIN role",
                details={"identity": target},
            )

    db.delete(grant)
    record_event(
        db,
        action=ROLE_REVOKED,
        actor=admin,
        details={"role": parsed.value, "identity": target},
        at=at,
    )
    db.commit()
    logger.info("Revoked %s from %s by %s", parsed.value, target, admin)
    return True
