from fastapi import APIRouter, Depends

from vendhub.core.auth import get_current_principal
from vendhub.core.principal import Principal
from vendhub.schemas.identity import PrincipalResponse

router = APIRouter()


@router.get("/me", response_model=PrincipalResponse)
def me(principal: Principal = Depends(get_current_principal)):
    """Current identity and role flags (requires valid Bearer token)."""
    return PrincipalResponse(
        user_id=principal.user_id,
        email=principal.email,
        company_id=principal.company_id,
        is_admin=principal.is_admin,
        is_operator=principal.is_operator,
    )
