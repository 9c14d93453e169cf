"""Core middleware chain infrastructure.

Defines the request context, handler/middleware protocols, and the
chain builder that composes middleware into a single async handler.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Protocol

from routegate.authz.permissions import RouteMetadata

# ── Type protocol ────────────────────────────────────────────────────────


class Handler(Protocol):
    """Async callable that takes a RequestContext and returns a result."""

    async def __call__(self, ctx: RequestContext) -> Any: ...


class Middleware(Protocol):
    """Async callable that wraps the next handler in the chain."""

    async def __call__(self, ctx: RequestContext, next_handler: Handler) -> Any: ...


# ── Request context ─────────────────────────────────────────────────────


@dataclass
class RequestContext:
    """Per-request metadata bag threaded through the middleware chain.

    Attributes:
        route: Route metadata of the handler the request was routed to.
        request: The host framework's request object, handed to the role
            resolver untouched.
        request_id: Unique identifier for this request.
        start_time: High-resolution monotonic timestamp.
        metadata: Arbitrary key–value store for middleware to attach data.
            The gate records ``role``, ``resource`` and ``action`` here.
    """

    route: RouteMetadata
    request: Any = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    start_time: float = field(default_factory=time.monotonic)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since request start."""
        return (time.monotonic() - self.start_time) * 1000.0


# ── Chain builder ────────────────────────────────────────────────────────


def build_chain(
    middlewares: List[Any],
    handler: Any,
) -> Callable[[RequestContext], Awaitable[Any]]:
    """Compose *middlewares* around a final *handler*.

    Middleware are applied in list order: the first middleware in the list
    is the outermost wrapper (executed first for requests, last for
    responses).

    Args:
        middlewares: Callables conforming to :class:`Middleware`.
        handler: The innermost handler.

    Returns:
        An async callable ``(RequestContext) -> Any``.
    """
    chain = handler
    for mw in reversed(middlewares):
        next_handler = chain

        async def _wrap(
            ctx: RequestContext,
            _mw: Any = mw,
            _next: Any = next_handler,
        ) -> Any:
            return await _mw(ctx, _next)

        chain = _wrap
    return chain
