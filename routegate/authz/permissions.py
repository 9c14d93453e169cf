"""Mapping of route metadata to ``(resource, action)`` permission tuples.

Handler names follow the ``<package path>/actions.<Name>[.<method>]``
convention, for example::

    shop/actions.WidgetsResource.new    resource route, action "new"
    shop/actions.Reports.export         plain route, resource "reports"
    shop/actions.home                   plain route, action only

Resource-bound routes also carry the binding's class name
(``WidgetsResource``), which names the resource directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from routegate.authz.aliases import DEFAULT_ACTION_ALIASES, AliasTable
from routegate.constants import ACTION_SEPARATOR, ACTIONS_SEPARATOR, RESOURCE_MARKER
from routegate.errors import MalformedRouteError


@dataclass(frozen=True)
class RouteMetadata:
    """Per-request route information supplied by the routing layer.

    Attributes:
        handler_name: Qualified handler identifier.
        resource_name: Resource-binding name (e.g. ``WidgetsResource``), or
            empty for plain routes.
    """

    handler_name: str
    resource_name: str = ""


@dataclass(frozen=True)
class PermissionTuple:
    """The (resource, action) pair checked against the policy engine."""

    resource: str
    action: str

    def __iter__(self):
        yield self.resource
        yield self.action


def resource_from_binding(resource_name: str) -> str:
    """Return the lower-cased text before the first resource marker."""
    return resource_name.split(RESOURCE_MARKER)[0].lower()


def raw_action(handler_name: str) -> str:
    """Return the lower-cased handler segment after the last actions separator."""
    return handler_name.split(ACTIONS_SEPARATOR)[-1].lower()


def derive_permission(
    route: RouteMetadata,
    aliases: AliasTable = DEFAULT_ACTION_ALIASES,
) -> PermissionTuple:
    """Derive the permission tuple for *route*.

    Aliases apply only when the handler segment has the dotted
    ``resource.action`` form; a bare action is returned as-is.

    Raises:
        MalformedRouteError: If the handler name is blank or yields an empty
            action.
    """
    if not route.handler_name or not route.handler_name.strip():
        raise MalformedRouteError("empty handler name", route)

    resource = ""
    if route.resource_name:
        resource = resource_from_binding(route.resource_name)

    action = raw_action(route.handler_name)

    if ACTION_SEPARATOR in action:
        parts = action.split(ACTION_SEPARATOR)
        if not resource:
            resource = parts[0]
        action = aliases.get(parts[-1], parts[-1])

    if not action:
        raise MalformedRouteError("handler name yields an empty action", route)

    return PermissionTuple(resource=resource, action=action)
