"""Route metadata for Starlette applications.

Handler identifiers follow the ``<module/path>.<qualname>`` form, so an
endpoint ``WidgetsResource.new`` defined in ``shop.actions`` is named
``shop/actions.WidgetsResource.new``.  Routes built by
:func:`resource_routes` additionally carry the resource-binding name
(``WidgetsResource``).
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Union

from starlette.routing import BaseRoute, Host, Match, Mount, Route
from starlette.types import Scope

from routegate.authz.aliases import DEFAULT_ACTION_ALIASES, AliasTable
from routegate.authz.permissions import PermissionTuple, RouteMetadata, derive_permission
from routegate.errors import MalformedRouteError

logger = logging.getLogger(__name__)

# (action, path suffix, methods), in match order: "/new" before "/{id}".
RESOURCE_ACTIONS: Tuple[Tuple[str, str, List[str]], ...] = (
    ("list", "", ["GET"]),
    ("new", "/new", ["GET"]),
    ("create", "", ["POST"]),
    ("show", "/{id}", ["GET"]),
    ("edit", "/{id}/edit", ["GET"]),
    ("update", "/{id}", ["PUT", "PATCH"]),
    ("destroy", "/{id}", ["DELETE"]),
)


def handler_identifier(endpoint: Any) -> str:
    """Return the qualified handler name of *endpoint*.

    ``functools.partial`` objects and ``functools.wraps`` chains are
    unwrapped; bound methods are named after their function.
    """
    func = endpoint
    while isinstance(func, functools.partial):
        func = func.func
    if inspect.ismethod(func):
        func = func.__func__
    func = inspect.unwrap(func)

    qualname = getattr(func, "__qualname__", None)
    module = getattr(func, "__module__", None)
    if qualname is None:
        # callable instance
        qualname = type(func).__qualname__
        module = type(func).__module__

    if not module:
        return qualname
    return f"{module.replace('.', '/')}.{qualname}"


class ResourceRoute(Route):
    """A Starlette route bound to a resource.

    Parameters
    ----------
    resource_name:
        Name of the resource binding, typically its class name
        (``WidgetsResource``).
    handler_name:
        Explicit handler identifier; defaults to the endpoint's
        :func:`handler_identifier`.
    """

    def __init__(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        resource_name: str = "",
        handler_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(path, endpoint, **kwargs)
        self.resource_name = resource_name
        self.handler_name = handler_name or handler_identifier(endpoint)


def resource_routes(path: str, resource: Any, *, name: Optional[str] = None) -> List[ResourceRoute]:
    """Build the conventional route set for *resource*.

    Only actions the resource object defines are routed::

        GET    /widgets             list
        GET    /widgets/new         new
        POST   /widgets             create
        GET    /widgets/{id}        show
        GET    /widgets/{id}/edit   edit
        PUT    /widgets/{id}        update   (and PATCH)
        DELETE /widgets/{id}        destroy
    """
    path = path.rstrip("/")
    resource_name = type(resource).__name__
    prefix = name or path.strip("/").replace("/", ":")

    routes: List[ResourceRoute] = []
    for action, suffix, methods in RESOURCE_ACTIONS:
        endpoint = getattr(resource, action, None)
        if endpoint is None or not callable(endpoint):
            continue
        routes.append(
            ResourceRoute(
                (path + suffix) or "/",
                endpoint,
                methods=methods,
                name=f"{prefix}:{action}",
                resource_name=resource_name,
            )
        )

    logger.debug(
        "Resource '%s' routed at %s: %s",
        resource_name,
        path or "/",
        ", ".join(r.name for r in routes),
    )
    return routes


def route_metadata(route: BaseRoute) -> RouteMetadata:
    """Return the :class:`RouteMetadata` of a Starlette *route*."""
    handler_name = getattr(route, "handler_name", None)
    if handler_name is None:
        endpoint = getattr(route, "endpoint", None)
        handler_name = handler_identifier(endpoint) if endpoint is not None else ""
    return RouteMetadata(
        handler_name=handler_name,
        resource_name=getattr(route, "resource_name", ""),
    )


def match_route(routes: Sequence[BaseRoute], scope: Scope) -> Optional[BaseRoute]:
    """Return the first route fully matching *scope*, descending into mounts.

    Partial matches (path matches, method does not) are not returned; the
    router answers those itself.
    """
    for route in routes:
        match, child_scope = route.matches(scope)
        if match != Match.FULL:
            continue
        if isinstance(route, (Mount, Host)):
            return match_route(route.routes, {**scope, **child_scope})
        return route
    return None


def iter_route_permissions(
    routes: Sequence[BaseRoute],
    aliases: AliasTable = DEFAULT_ACTION_ALIASES,
    prefix: str = "",
) -> Iterator[Tuple[str, List[str], RouteMetadata, Union[PermissionTuple, MalformedRouteError]]]:
    """Yield ``(path, methods, metadata, permission-or-error)`` for every route."""
    for route in routes:
        path = prefix + getattr(route, "path", "")
        if isinstance(route, (Mount, Host)):
            yield from iter_route_permissions(route.routes, aliases, prefix=path)
            continue
        if getattr(route, "endpoint", None) is None:
            continue
        meta = route_metadata(route)
        methods = sorted(getattr(route, "methods", None) or [])
        try:
            perm: Union[PermissionTuple, MalformedRouteError] = derive_permission(meta, aliases)
        except MalformedRouteError as exc:
            perm = exc
        yield path, methods, meta, perm
