"""Error hierarchy for routegate.

Three outcomes leave the gate other than forwarding:

* :class:`DependencyFailure` -- the role resolver or policy engine raised.
  The request fails; it is never turned into a denial.
* :class:`MalformedRouteError` -- route metadata could not be mapped to a
  permission tuple.  Fails closed, same class of error as a dependency failure.
* :class:`AuthorizationDenied` -- the policy engine answered ``False``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from routegate.authz.permissions import RouteMetadata


class GateError(Exception):
    """Base class for all routegate errors."""


class ConfigurationError(GateError):
    """Raised when loading or validating gate settings fails."""


class DependencyFailure(GateError):
    """A collaborator of the gate failed while handling a request.

    Attributes:
        kind: Which step failed: ``"role"``, ``"enforce"`` or ``"route"``.
        route: Route metadata of the request, when known.
        cause: The underlying exception, if any (also set as ``__cause__``
            by the raiser).
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        route: Optional[RouteMetadata] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.kind = kind
        self.route = route
        self.cause = cause

        full_msg = f"{message} (stage: {kind}"
        if route is not None:
            full_msg += f", handler: {route.handler_name!r}"
        full_msg += ")"
        if cause is not None:
            full_msg += f": {type(cause).__name__}: {cause}"
        super().__init__(full_msg)


class MalformedRouteError(DependencyFailure):
    """Route metadata does not yield a usable (resource, action) pair."""

    def __init__(self, reason: str, route: RouteMetadata) -> None:
        self.reason = reason
        super().__init__(f"Malformed route: {reason}", kind="route", route=route)


class AuthorizationDenied(GateError):
    """The policy engine refused the request.

    ``str(exc)`` is exactly the configured denial message.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        role: Optional[str] = None,
        resource: Optional[str] = None,
        action: Optional[str] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.role = role
        self.resource = resource
        self.action = action
        super().__init__(message)
