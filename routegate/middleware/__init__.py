"""Gate middleware and the chain it runs in."""

from routegate.middleware.authz import (
    AuthorizeMiddleware,
    GateConfig,
    authorize,
    finalize_config,
)
from routegate.middleware.chain import RequestContext, build_chain

__all__ = [
    "AuthorizeMiddleware",
    "GateConfig",
    "RequestContext",
    "authorize",
    "build_chain",
    "finalize_config",
]
