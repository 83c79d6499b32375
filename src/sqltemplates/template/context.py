"""Per-render variable bindings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqltemplates.template.values import Map, Value, from_python


class Context:
    """Mutable ``name -> Value`` table owned by a single render call.

    Seeded from caller bindings; ``{% set %}`` adds or overwrites entries
    for the nodes that follow.  There is no block scoping.

    Caller bindings are converted on first lookup, so a value the template
    never references may be of any Python type.
    """

    def __init__(self, bindings: Mapping[str, Any] | None = None) -> None:
        self._raw: dict[str, Any] = {str(k): v for k, v in bindings.items()} if bindings else {}
        self._values: dict[str, Value] = {}

    def get(self, name: str) -> Value | None:
        value = self._values.get(name)
        if value is None and name in self._raw:
            value = self._values[name] = from_python(self._raw[name])
            del self._raw[name]
        return value

    def set(self, name: str, value: Value) -> None:
        self._raw.pop(name, None)
        self._values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._values or name in self._raw

    @property
    def resources(self) -> Map | None:
        """The ``resources`` mapping used by ``object()``, if one was supplied."""
        value = self.get("resources")
        return value if isinstance(value, Map) else None
