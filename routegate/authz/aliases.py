"""Action alias tables.

An alias maps a raw verb taken from a handler name to its canonical action
(``new`` -> ``create``).  Tables are immutable; :func:`merge_aliases` returns
a new table instead of updating one in place.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

AliasTable = Mapping[str, str]

DEFAULT_ACTION_ALIASES: AliasTable = MappingProxyType(
    {
        "new": "create",
        "edit": "update",
        "destroy": "delete",
    }
)


def merge_aliases(
    base: AliasTable,
    overrides: Optional[Mapping[str, str]] = None,
) -> AliasTable:
    """Return *base* with every key of *overrides* written over it.

    Override entries win on key collision, untouched base entries survive and
    new keys are added.  Neither input is modified.
    """
    merged = dict(base)
    if overrides:
        merged.update(overrides)
    return MappingProxyType(merged)
