"""Role management endpoints."""
from fastapi import APIRouter, Depends

from ..auth import get_current_identity
from ..ledger import Ledger, get_ledger
from ..schemas import (
    HasRoleResponse,
    RoleChangeRequest,
    RoleChangeResponse,
    RoleDirectoryResponse,
    RoleMemberOut,
)
from ..use_cases.role_manager import (
    get_user_count,
    grant_role_use_case,
    has_role,
    list_members,
    parse_role_or_invalid,
    revoke_role_use_case,
    roles_of,
)

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("", response_model=RoleDirectoryResponse)
def get_role_directory(ledger: Ledger = Depends(get_ledger)):
    """All identities holding at least one role."""
    with ledger.session() as db:
        members = list_members(db)
        user_count = get_user_count(db)
    return RoleDirectoryResponse(
        user_count=user_count,
        members=[
            RoleMemberOut(identity=member.identity, roles=sorted(role.value for role in member.roles))
            for member in members
        ],
    )


@router.get("/{identity}", response_model=RoleMemberOut)
def get_roles_of(identity: str, ledger: Ledger = Depends(get_ledger)):
    with ledger.session() as db:
        roles = roles_of(db, identity)
    return RoleMemberOut(identity=identity.strip().lower(), roles=sorted(role.value for role in roles))


@router.get("/{identity}/{role}", response_model=HasRoleResponse)
def get_has_role(identity: str, role: str, ledger: Ledger = Depends(get_ledger)):
    parsed = parse_role_or_invalid(role)
    with ledger.session() as db:
        held = has_role(db, parsed, identity)
    return HasRoleResponse(identity=identity.strip().lower(), role=parsed.value, has_role=held)


@router.post("/grant", response_model=RoleChangeResponse)
def grant_role(
    payload: RoleChangeRequest,
    caller: str = Depends(get_current_identity),
    ledger: Ledger = Depends(get_ledger),
):
    with ledger.session() as db:
        changed = grant_role_use_case(db=db, role=payload.role, identity=payload.identity, caller=caller)
    return RoleChangeResponse(
        role=parse_role_or_invalid(payload.role).value,
        identity=payload.identity.strip().lower(),
        changed=changed,
    )


@router.post("/revoke", response_model=RoleChangeResponse)
def revoke_role(
    payload: RoleChangeRequest,
    caller: str = Depends(get_current_identity),
    ledger: Ledger = Depends(get_ledger),
):
    with ledger.session() as db:
        changed = revoke_role_use_case(db=db, role=payload.role, identity=payload.identity, caller=caller)
    return RoleChangeResponse(
        role=parse_role_or_invalid(payload.role).value,
        identity=payload.identity.strip().lower(),
        changed=changed,
    )
