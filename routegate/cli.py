"""CLI argument parsing and main entry point.

Subcommands:

* ``routegate derive``      : show the permission tuple of one handler name.
* ``routegate routes``      : tabulate the permissions of a Starlette app's routes.
* ``routegate check-config``: validate a settings file.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os
import sys
from typing import Any, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from routegate.authz.aliases import DEFAULT_ACTION_ALIASES, AliasTable, merge_aliases
from routegate.authz.permissions import RouteMetadata, derive_permission
from routegate.config.loader import load_gate_settings
from routegate.config.schema import GateSettings
from routegate.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_DENIED_MESSAGE,
    DEFAULT_DENIED_STATUS,
    DEFAULT_LOG_LEVEL,
    PACKAGE_NAME,
    PACKAGE_VERSION,
)
from routegate.display.console import alias_table, print_table, route_table
from routegate.display.logging_config import setup_logging
from routegate.errors import ConfigurationError, MalformedRouteError
from routegate.server.routing import iter_route_permissions

module_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_MALFORMED = 2


def _load_settings(args: argparse.Namespace) -> Optional[GateSettings]:
    """Load the settings file named on the command line or by the env var."""
    config_path = getattr(args, "file", None) or getattr(args, "config", None)
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        return None
    return load_gate_settings(config_path)


def _effective_aliases(settings: Optional[GateSettings]) -> AliasTable:
    """Alias table after merging the overrides of *settings*, if any."""
    if settings is None:
        return DEFAULT_ACTION_ALIASES
    return merge_aliases(DEFAULT_ACTION_ALIASES, settings.authorization.action_aliases)


def _import_routes(target: str) -> List[Any]:
    """Import ``module:attr`` and return its routes.

    *attr* may be a Starlette app, a router or a plain list of routes.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Expected MODULE:ATTR, got '{target}'")
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    try:
        obj = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Cannot import '{target}': {exc}") from exc
    routes = obj if isinstance(obj, (list, tuple)) else getattr(obj, "routes", None)
    if routes is None:
        raise ConfigurationError(f"'{target}' has no routes")
    return list(routes)


# ── Subcommands ──────────────────────────────────────────────────────────


def _cmd_derive(args: argparse.Namespace, console: Console) -> int:
    aliases = _effective_aliases(args.settings)
    route = RouteMetadata(handler_name=args.handler, resource_name=args.resource or "")
    try:
        perm = derive_permission(route, aliases)
    except MalformedRouteError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_MALFORMED
    console.print(f"{perm.resource} {perm.action}", highlight=False)
    return EXIT_OK


def _cmd_routes(args: argparse.Namespace, console: Console) -> int:
    aliases = _effective_aliases(args.settings)
    routes = _import_routes(args.target)
    rows = list(iter_route_permissions(routes, aliases))
    print_table(route_table(rows), console)
    malformed = sum(1 for *_, perm in rows if isinstance(perm, MalformedRouteError))
    return EXIT_MALFORMED if malformed else EXIT_OK


def _cmd_check_config(args: argparse.Namespace, console: Console) -> int:
    settings: GateSettings = args.settings
    authz = settings.authorization
    console.print(f"[green]✓[/green] {escape(args.file)} is valid (v{settings.version})")
    console.print(f"Denied status:  {authz.denied_status or DEFAULT_DENIED_STATUS}")
    console.print(f"Denied message: {escape(authz.denied_message or DEFAULT_DENIED_MESSAGE)}")
    if authz.skip_paths:
        console.print(f"Skipped paths:  {escape(', '.join(authz.skip_paths))}")
    console.print(f"Log level:      {settings.logging.level}")
    console.print(f"Log file:       {escape(settings.logging.file or '-')}")
    print_table(alias_table(merge_aliases(DEFAULT_ACTION_ALIASES, authz.action_aliases)), console)
    return EXIT_OK


# ── Parser ───────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PACKAGE_NAME,
        description="Inspect route permissions and gate settings.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {PACKAGE_VERSION}")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); overrides the settings file.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_derive = sub.add_parser("derive", help="Derive the permission tuple of a handler name.")
    p_derive.add_argument("handler", help="Qualified handler name, e.g. app/actions.Widgets.New")
    p_derive.add_argument("--resource", default="", help="Resource-binding name, e.g. WidgetsResource")
    p_derive.add_argument("--config", default=None, help=f"Settings file (default: ${CONFIG_ENV_VAR})")
    p_derive.set_defaults(func=_cmd_derive)

    p_routes = sub.add_parser("routes", help="Tabulate route permissions of a Starlette app.")
    p_routes.add_argument("target", help="MODULE:ATTR of the app, router or route list")
    p_routes.add_argument("--config", default=None, help=f"Settings file (default: ${CONFIG_ENV_VAR})")
    p_routes.set_defaults(func=_cmd_routes)

    p_check = sub.add_parser("check-config", help="Validate a settings file.")
    p_check.add_argument("file", help="Path to a YAML settings file")
    p_check.set_defaults(func=_cmd_check_config)

    return parser


def _config_error(exc: ConfigurationError, console: Console) -> int:
    module_logger.error("%s", exc)
    console.print(f"[red]Configuration error:[/red] {escape(str(exc))}", highlight=False)
    return EXIT_CONFIG


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    # --log-level wins over the settings file's logging section.
    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        setup_logging(args.log_level or DEFAULT_LOG_LEVEL, None)
        return _config_error(exc, console)

    if settings is not None:
        setup_logging(args.log_level or settings.logging.level, settings.logging.file or None)
    else:
        setup_logging(args.log_level or DEFAULT_LOG_LEVEL, None)
    args.settings = settings

    try:
        return args.func(args, console)
    except ConfigurationError as exc:
        return _config_error(exc, console)


if __name__ == "__main__":
    sys.exit(main())
