"""Auth endpoints."""
from fastapi import APIRouter, Depends

from ..auth import get_current_identity, issue_token_for
from ..config import settings
from ..ledger import Ledger, get_ledger
from ..schemas import IdentityResponse, TokenRequest, TokenResponse
from ..services.roles import get_ui_capabilities
from ..use_cases.role_manager import roles_of

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=TokenResponse)
def issue_token(payload: TokenRequest):
    """Exchange a configured account identity for an access token."""
    token = issue_token_for(payload.identity)
    return TokenResponse(
        access_token=token,
        expires_in=int(settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES) * 60,
        identity=payload.identity.strip().lower(),
    )


@router.get("/me", response_model=IdentityResponse)
def get_me(
    identity: str = Depends(get_current_identity),
    ledger: Ledger = Depends(get_ledger),
):
    """Current identity with its roles and UI capability flags."""
    with ledger.session() as db:
        roles = roles_of(db, identity)
    return IdentityResponse(
        identity=identity,
        roles=sorted(role.value for role in roles),
        capabilities=get_ui_capabilities(roles),
    )
