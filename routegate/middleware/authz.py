"""Authorization gate middleware.

Resolves the caller's role, maps the routed handler to a
``(resource, action)`` pair and consults the policy engine.  Approved
requests continue down the chain untouched; refused requests raise
:class:`AuthorizationDenied` carrying the configured status and message.

Failures of the role resolver or policy engine raise
:class:`DependencyFailure` and are never reported as a denial.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Mapping, Optional

from routegate.authz.aliases import DEFAULT_ACTION_ALIASES, AliasTable, merge_aliases
from routegate.authz.engine import PolicyEngine, RoleResolver, resolve_maybe_awaitable
from routegate.authz.permissions import PermissionTuple, derive_permission
from routegate.constants import DEFAULT_DENIED_MESSAGE, DEFAULT_DENIED_STATUS
from routegate.errors import AuthorizationDenied, DependencyFailure, MalformedRouteError
from routegate.middleware.chain import Handler, RequestContext

if TYPE_CHECKING:
    from routegate.config.schema import GateSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateConfig:
    """Construction-time configuration of the gate.

    ``denied_status`` of ``0`` and an empty ``denied_message`` mean "unset";
    :func:`finalize_config` fills in the defaults.
    """

    enforcer: PolicyEngine
    role_func: RoleResolver
    action_aliases: Mapping[str, str] = field(default_factory=dict)
    denied_status: int = 0
    denied_message: str = ""

    @classmethod
    def from_settings(
        cls,
        settings: GateSettings,
        *,
        enforcer: PolicyEngine,
        role_func: RoleResolver,
    ) -> GateConfig:
        """Build a config from validated :class:`GateSettings`."""
        authz = settings.authorization
        return cls(
            enforcer=enforcer,
            role_func=role_func,
            action_aliases=dict(authz.action_aliases),
            denied_status=authz.denied_status,
            denied_message=authz.denied_message,
        )


def finalize_config(config: GateConfig) -> GateConfig:
    """Return *config* with denial defaults and the merged alias table.

    Pure and idempotent: finalizing an already-finalized config returns an
    equal config.
    """
    return replace(
        config,
        denied_status=config.denied_status or DEFAULT_DENIED_STATUS,
        denied_message=config.denied_message or DEFAULT_DENIED_MESSAGE,
        action_aliases=merge_aliases(DEFAULT_ACTION_ALIASES, config.action_aliases),
    )


class AuthorizeMiddleware:
    """Middleware that enforces role permissions on routed requests.

    Parameters
    ----------
    config:
        Gate configuration; finalized once here and read-only afterwards.
    """

    def __init__(self, config: GateConfig) -> None:
        self._config = finalize_config(config)

    @property
    def config(self) -> GateConfig:
        return self._config

    @property
    def aliases(self) -> AliasTable:
        return self._config.action_aliases

    async def resolve_role(self, ctx: RequestContext) -> str:
        try:
            return await resolve_maybe_awaitable(self._config.role_func(ctx.request))
        except Exception as exc:
            logger.error(
                "Role resolution failed for request %s (%s): %s",
                ctx.request_id,
                ctx.route.handler_name,
                exc,
            )
            raise DependencyFailure(
                "Role resolution failed", kind="role", route=ctx.route, cause=exc
            ) from exc

    async def enforce(self, ctx: RequestContext, role: str, perm: PermissionTuple) -> bool:
        try:
            allowed = await resolve_maybe_awaitable(
                self._config.enforcer.enforce(role, perm.resource, perm.action)
            )
        except Exception as exc:
            logger.error(
                "Policy enforcement failed for request %s: role=%s, resource=%s, action=%s: %s",
                ctx.request_id,
                role,
                perm.resource,
                perm.action,
                exc,
            )
            raise DependencyFailure(
                "Policy enforcement failed", kind="enforce", route=ctx.route, cause=exc
            ) from exc
        return bool(allowed)

    async def __call__(self, ctx: RequestContext, next_handler: Handler) -> Any:
        """Authorize the request and continue or deny."""
        role = await self.resolve_role(ctx)
        ctx.metadata["role"] = role

        try:
            perm = derive_permission(ctx.route, self.aliases)
        except MalformedRouteError as exc:
            logger.error(
                "Permission derivation failed for request %s (%r): %s",
                ctx.request_id,
                ctx.route.handler_name,
                exc.reason,
            )
            raise
        ctx.metadata["resource"] = perm.resource
        ctx.metadata["action"] = perm.action

        if not await self.enforce(ctx, role, perm):
            logger.warning(
                "Authorization DENIED: request=%s, role=%s, resource=%s, action=%s (%.1fms)",
                ctx.request_id,
                role,
                perm.resource,
                perm.action,
                ctx.elapsed_ms,
            )
            raise AuthorizationDenied(
                self._config.denied_message,
                status_code=self._config.denied_status,
                role=role,
                resource=perm.resource,
                action=perm.action,
            )

        logger.debug(
            "Authorization allowed: request=%s, role=%s, resource=%s, action=%s (%.1fms)",
            ctx.request_id,
            role,
            perm.resource,
            perm.action,
            ctx.elapsed_ms,
        )
        return await next_handler(ctx)


def authorize(
    enforcer: PolicyEngine,
    role_func: RoleResolver,
    *,
    action_aliases: Optional[Mapping[str, str]] = None,
    denied_status: int = 0,
    denied_message: str = "",
) -> AuthorizeMiddleware:
    """Shorthand for ``AuthorizeMiddleware(GateConfig(...))``."""
    return AuthorizeMiddleware(
        GateConfig(
            enforcer=enforcer,
            role_func=role_func,
            action_aliases=dict(action_aliases or {}),
            denied_status=denied_status,
            denied_message=denied_message,
        )
    )
