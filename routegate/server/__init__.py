"""Starlette integration: route metadata and the ASGI gate."""

from routegate.server.asgi import AuthorizeASGIMiddleware, gate_middleware
from routegate.server.routing import (
    ResourceRoute,
    handler_identifier,
    iter_route_permissions,
    match_route,
    resource_routes,
    route_metadata,
)

__all__ = [
    "AuthorizeASGIMiddleware",
    "gate_middleware",
    "ResourceRoute",
    "handler_identifier",
    "iter_route_permissions",
    "match_route",
    "resource_routes",
    "route_metadata",
]
