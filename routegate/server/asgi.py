"""ASGI glue that runs the authorization gate in front of a Starlette app.

Uses the ASGI interface directly (no ``BaseHTTPMiddleware``) so the gate
runs in the request's own task.

Usage::

    gate = authorize(enforcer, role_func)
    app = Starlette(
        routes=[*resource_routes("/widgets", WidgetsResource()), ...],
        middleware=[Middleware(AuthorizeASGIMiddleware, gate=gate)],
    )
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Iterable, Optional, Sequence

from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import BaseRoute
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from routegate.authz.engine import PolicyEngine, RoleResolver
from routegate.config.schema import GateSettings
from routegate.errors import AuthorizationDenied
from routegate.middleware.authz import AuthorizeMiddleware, GateConfig
from routegate.middleware.chain import Middleware as GateMiddleware, RequestContext, build_chain
from routegate.server.routing import match_route, route_metadata

logger = logging.getLogger(__name__)


class AuthorizeASGIMiddleware:
    """Pure ASGI middleware that authorizes routed HTTP requests.

    Parameters
    ----------
    app:
        The wrapped ASGI application.
    gate:
        The configured :class:`AuthorizeMiddleware`.
    skip_paths:
        Request paths that bypass the gate (health checks and the like).
    routes:
        Routes to match requests against.  Defaults to the routes of the
        Starlette application in ``scope["app"]``.
    middlewares:
        Chain middleware run around the gate, outermost first.  They see the
        request context before authorization and any denial raised by it.
    """

    def __init__(
        self,
        app: ASGIApp,
        gate: AuthorizeMiddleware,
        *,
        skip_paths: Iterable[str] = (),
        routes: Optional[Sequence[BaseRoute]] = None,
        middlewares: Sequence[GateMiddleware] = (),
    ) -> None:
        self.app = app
        self._gate = gate
        self._skip_paths = frozenset(skip_paths)
        self._routes = routes
        self._middlewares = list(middlewares)

    def _routes_for(self, scope: Scope) -> Sequence[BaseRoute]:
        if self._routes is not None:
            return self._routes
        return getattr(scope.get("app"), "routes", None) or []

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "/")
        if path in self._skip_paths or path.rstrip("/") in self._skip_paths:
            await self.app(scope, receive, send)
            return

        route = match_route(self._routes_for(scope), scope)
        if route is None:
            # Unrouted: the router answers 404/405.
            logger.debug("No route matched %s %s; gate skipped.", scope.get("method"), path)
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        ctx = RequestContext(route=route_metadata(route), request=request)
        forwarded = False

        async def _forward(_ctx: RequestContext) -> Any:
            nonlocal forwarded
            forwarded = True
            await self.app(scope, _replay_body(request, receive), send)

        chain = build_chain([*self._middlewares, self._gate], _forward)
        try:
            await chain(ctx)
        except AuthorizationDenied as exc:
            if forwarded:
                raise
            response = _denied(exc)
            await response(scope, receive, send)


def _replay_body(request: Request, receive: Receive) -> Receive:
    """Return a ``receive`` that first yields the body *request* already read.

    A role resolver reading the body consumes the ``http.request`` messages;
    the downstream app gets them back from the cached body.
    """
    body = getattr(request, "_body", None)
    if body is None:
        return receive

    replayed = False

    async def _receive() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return _receive


def _denied(exc: AuthorizationDenied) -> JSONResponse:
    """Return the denial response for *exc*, labelled by its status code."""
    try:
        label = HTTPStatus(exc.status_code).phrase
    except ValueError:
        label = "Denied"
    return JSONResponse(
        {"error": label, "message": exc.message},
        status_code=exc.status_code,
    )


def gate_middleware(
    settings: GateSettings,
    *,
    enforcer: PolicyEngine,
    role_func: RoleResolver,
) -> Middleware:
    """Return a Starlette ``Middleware`` entry configured from *settings*."""
    gate = AuthorizeMiddleware(
        GateConfig.from_settings(settings, enforcer=enforcer, role_func=role_func)
    )
    return Middleware(
        AuthorizeASGIMiddleware,
        gate=gate,
        skip_paths=list(settings.authorization.skip_paths),
    )
