"""Group the document's operations by tag.

Every path x method entry becomes one Operation. Tags come from the
operation's first tag (sanitized), or "default". Document order is kept:
it is the emission order of every generated file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .loader import get_paths
from .naming import sanitize_tag_name, strip_base_path

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

DEFAULT_TAG = "default"

_PATH_PARAM_RE = re.compile(r"\{([^}]+)\}")


@dataclass(frozen=True)
class Operation:
    """One path x method entry of the document."""

    path: str
    original_path: str
    method: str
    tag: str
    operation_id: str | None = None
    summary: str | None = None
    description: str | None = None


def normalize_strip_paths(strip_base_path: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """The strip-base-path setting as an ordered list of prefixes."""
    if not strip_base_path:
        return []
    if isinstance(strip_base_path, str):
        return [strip_base_path]
    return [p for p in strip_base_path if p]


def _operation_tag(operation: dict[str, Any]) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str):
        return sanitize_tag_name(tags[0])
    return DEFAULT_TAG


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def build_catalog(
    spec: dict[str, Any],
    base_paths: str | list[str] | None = None,
) -> dict[str, list[Operation]]:
    """Map tag -> operations in document order."""
    strip_paths = normalize_strip_paths(base_paths)
    catalog: dict[str, list[Operation]] = {}

    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue
        # Only HTTP verbs; skips "parameters", "summary", "servers", x-* keys
        for method, operation in path_item.items():
            if str(method).lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue

            tag = _operation_tag(operation)
            catalog.setdefault(tag, []).append(Operation(
                path=strip_base_path(path, strip_paths),
                original_path=path,
                method=str(method).upper(),
                tag=tag,
                operation_id=_text(operation.get("operationId")),
                summary=_text(operation.get("summary")),
                description=_text(operation.get("description")),
            ))

    return catalog


def get_operation(spec: dict[str, Any], operation: Operation) -> dict[str, Any]:
    """The raw operation object, looked up by its original path."""
    for method, raw in get_path_item(spec, operation).items():
        if str(method).upper() == operation.method and isinstance(raw, dict):
            return raw
    return {}


def get_path_item(spec: dict[str, Any], operation: Operation) -> dict[str, Any]:
    path_item = get_paths(spec).get(operation.original_path)
    return path_item if isinstance(path_item, dict) else {}


def extract_path_params(path: str) -> list[str]:
    """/categories/{id}/items/{itemId} -> ['id', 'itemId']"""
    return _PATH_PARAM_RE.findall(path)


def count_operations(catalog: dict[str, list[Operation]]) -> int:
    return sum(len(ops) for ops in catalog.values())
