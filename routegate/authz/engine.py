"""Interfaces of the gate's two collaborators.

The gate is generic over any policy engine and role resolver that satisfy
these protocols.  Either may be synchronous or return an awaitable;
:func:`resolve_maybe_awaitable` normalizes the two.  A ``casbin.Enforcer``
satisfies :class:`PolicyEngine` as-is.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Protocol, TypeVar, Union

T = TypeVar("T")


class PolicyEngine(Protocol):
    """Answers "may *subject* perform *action* on *resource*?"."""

    def enforce(self, subject: str, resource: str, action: str) -> Union[bool, Awaitable[bool]]: ...


class RoleResolver(Protocol):
    """Returns the acting principal's role for a host request."""

    def __call__(self, request: Any) -> Union[str, Awaitable[str]]: ...


async def resolve_maybe_awaitable(value: Union[T, Awaitable[T]]) -> T:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]
