"""
routegate - role-based request authorization for Starlette applications.

Maps each routed request to a ``(resource, action)`` pair, asks a policy
engine whether the caller's role may perform it, and either forwards the
request or answers with a configurable denial.
"""

from routegate.authz import (
    DEFAULT_ACTION_ALIASES,
    PermissionTuple,
    PolicyEngine,
    RoleResolver,
    RouteMetadata,
    derive_permission,
    merge_aliases,
)
from routegate.constants import PACKAGE_NAME, PACKAGE_VERSION
from routegate.errors import (
    AuthorizationDenied,
    ConfigurationError,
    DependencyFailure,
    GateError,
    MalformedRouteError,
)
from routegate.middleware import (
    AuthorizeMiddleware,
    GateConfig,
    RequestContext,
    authorize,
    build_chain,
    finalize_config,
)

__version__ = PACKAGE_VERSION
__app_name__ = PACKAGE_NAME

__all__ = [
    "AuthorizationDenied",
    "AuthorizeMiddleware",
    "ConfigurationError",
    "DEFAULT_ACTION_ALIASES",
    "DependencyFailure",
    "GateConfig",
    "GateError",
    "MalformedRouteError",
    "PermissionTuple",
    "PolicyEngine",
    "RequestContext",
    "RoleResolver",
    "RouteMetadata",
    "authorize",
    "build_chain",
    "derive_permission",
    "finalize_config",
    "merge_aliases",
    "__version__",
    "__app_name__",
]
