"""Permission mapping and the gate's collaborator interfaces."""

from routegate.authz.aliases import DEFAULT_ACTION_ALIASES, AliasTable, merge_aliases
from routegate.authz.engine import PolicyEngine, RoleResolver
from routegate.authz.permissions import PermissionTuple, RouteMetadata, derive_permission

__all__ = [
    "AliasTable",
    "DEFAULT_ACTION_ALIASES",
    "PermissionTuple",
    "PolicyEngine",
    "RoleResolver",
    "RouteMetadata",
    "derive_permission",
    "merge_aliases",
]
