from fastapi import APIRouter, Depends

from vendhub.core.deps import get_base_gateway
from vendhub.core.exceptions import BackendError
from vendhub.gateway import Gateway, SqlGateway

router = APIRouter()


@router.get("")
async def health_check(gateway: Gateway = Depends(get_base_gateway)):
    """Health check; includes backend connectivity."""
    try:
        await gateway.ping()
        backend_ok = True
    except BackendError:
        backend_ok = False
    return {
        "status": "ok",
        "backend": "connected" if backend_ok else "disconnected",
        "gateway": "sql" if isinstance(gateway, SqlGateway) else "rest",
    }
