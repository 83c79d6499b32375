"""YAML loader for render contexts (resource handles and aliases).

A context file looks like::

    resources:
      postgres_table.users:
        __handle_type: postgres_table
        schema: public
        table: users
        qualified_name: '"public"."users"'
        id: '"public"."users"."id"'
    table:
      users:
        __handle_type: postgres_table
        schema: public
        table: users
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 20

# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name (good-enough heuristic, ignores quoting).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)
_COMMENT_RE = re.compile(r"(?:^|\s)#.*$", re.MULTILINE)


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from :class:`ContextLoadError`: these indicate potentially
    malicious input (anchor expansion, excessive nesting, oversized documents).
    """


class ContextLoadError(Exception):
    """Raised when a context document is not valid YAML or has the wrong shape."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class ContextLoader:
    """Loads render contexts from YAML with ruamel.yaml.

    The result is a plain ``dict`` ready for ``render_with_context``.
    Sequences are rejected because templates have no list values.
    """

    def __init__(self) -> None:
        self._yaml = YAML()
        # Reject deeply nested structures (mitigates stack-based DoS).
        self._yaml.max_depth = _MAX_DEPTH

    # -- safety checks -------------------------------------------------------

    @staticmethod
    def _check_yaml_safety(content: str) -> None:
        """Pre-parse safety checks on raw YAML text."""
        if len(content) > _MAX_DOCUMENT_SIZE:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {_MAX_DOCUMENT_SIZE:,} limit)"
            )
        if _ANCHOR_RE.search(_COMMENT_RE.sub("", content)):
            raise YAMLSafetyError("YAML anchors/aliases are not supported in render contexts")

    @staticmethod
    def _check_node_count(data: Any, limit: int = _MAX_NODE_COUNT) -> None:
        """Post-parse defense-in-depth: reject documents with too many nodes."""
        count = 0
        stack: list[Any] = [data]
        while stack:
            node = stack.pop()
            count += 1
            if count > limit:
                raise YAMLSafetyError(f"YAML document exceeds maximum node count ({limit:,})")
            if isinstance(node, dict):
                stack.extend(node.values())
            elif isinstance(node, list):
                stack.extend(node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> dict[str, Any]:
        """Load a context YAML file."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content)

    def load_string(self, content: str) -> dict[str, Any]:
        """Load a context from a YAML string. An empty document yields ``{}``."""
        self._check_yaml_safety(content)
        try:
            data = self._yaml.load(content)
        except YAMLError as exc:
            raise ContextLoadError(f"Invalid YAML: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, CommentedMap):
            raise ContextLoadError("Context document must be a YAML mapping")
        self._check_node_count(data)
        self._check_resources(data)
        return self._to_plain_dict(data)

    # -- shape checks and conversion ----------------------------------------

    @staticmethod
    def _check_resources(data: CommentedMap) -> None:
        resources = data.get("resources")
        if resources is None:
            return
        if not isinstance(resources, CommentedMap):
            raise ContextLoadError(
                "'resources' must be a mapping of reference to handle",
                line=data.lc.key("resources")[0] + 1,
            )
        for ref, handle in resources.items():
            if not isinstance(handle, CommentedMap):
                raise ContextLoadError(
                    f"resource '{ref}' must be a mapping",
                    line=resources.lc.key(ref)[0] + 1,
                )

    def _to_plain_dict(self, data: CommentedMap) -> dict[str, Any]:
        return {str(k): self._to_plain_value(v, str(k)) for k, v in data.items()}

    def _to_plain_value(self, data: Any, path: str) -> Any:
        if isinstance(data, CommentedMap):
            return {str(k): self._to_plain_value(v, f"{path}.{k}") for k, v in data.items()}
        if isinstance(data, CommentedSeq):
            raise ContextLoadError(
                f"'{path}' is a sequence; context values must be scalars or mappings"
            )
        if isinstance(data, bool) or data is None:
            return data
        if isinstance(data, int):
            return int(data)
        if isinstance(data, float):
            return float(data)
        return str(data)
