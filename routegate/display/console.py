"""Rich rendering of route permissions and gate settings."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from routegate.authz.aliases import AliasTable
from routegate.authz.permissions import PermissionTuple, RouteMetadata
from routegate.errors import MalformedRouteError

RoutePermissionRow = Tuple[str, List[str], RouteMetadata, Union[PermissionTuple, MalformedRouteError]]


def route_table(rows: Iterable[RoutePermissionRow]) -> Table:
    """Build a table of path, methods, handler and derived permission."""
    table = Table(title="Route permissions")
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Methods", style="blue")
    table.add_column("Handler")
    table.add_column("Resource", style="magenta")
    table.add_column("Action", style="green")

    for path, methods, meta, perm in rows:
        if isinstance(perm, MalformedRouteError):
            resource, action = "[red]-[/red]", f"[red]{perm.reason}[/red]"
        else:
            resource, action = perm.resource or "[dim](none)[/dim]", perm.action
        table.add_row(path, ",".join(methods) or "*", escape(meta.handler_name), resource, action)
    return table


def alias_table(aliases: AliasTable) -> Table:
    table = Table(title="Action aliases")
    table.add_column("Raw action", style="cyan")
    table.add_column("Canonical action", style="green")
    for raw in sorted(aliases):
        table.add_row(raw, aliases[raw])
    return table


def print_table(table: Table, console: Optional[Console] = None) -> None:
    (console or Console()).print(table)
