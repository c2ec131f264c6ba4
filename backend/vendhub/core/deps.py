from fastapi import Depends, Request

from vendhub.core.auth import get_current_principal
from vendhub.core.principal import Principal
from vendhub.gateway import Gateway, RestGateway


def get_base_gateway(request: Request) -> Gateway:
    return request.app.state.gateway


def get_gateway(
    principal: Principal = Depends(get_current_principal),
    gateway: Gateway = Depends(get_base_gateway),
) -> Gateway:
    """Gateway for the current request; REST calls are made with the caller's token."""
    if isinstance(gateway, RestGateway):
        return gateway.with_token(principal.access_token)
    return gateway
