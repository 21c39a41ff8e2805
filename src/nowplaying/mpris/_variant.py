"""Tagged-variant unwrapping.

Bus libraries hand back property values either raw (``"Playing"``) or
wrapped in a variant carrying its D-Bus signature
(``Variant("s", "Playing")``). Everything that reads bus data goes through
:func:`unwrap_variant` exactly once per level.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Wrapped(Protocol):
    """Shape of a variant: a signature plus the wrapped value (``dbus_next.Variant``)."""

    signature: Any
    value: Any


def unwrap_variant(value: Wrapped | T) -> Any:
    """Return the payload of a wrapped value, or *value* itself when raw."""
    if isinstance(value, Wrapped):
        return value.value
    return value
