"""Load the OpenAPI / Swagger document and resolve $ref pointers.

The document comes from a local path or an http(s) URL. JSON is the
expected format; .yaml/.yml sources are parsed with PyYAML.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from .errors import SpecLoadError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0

_YAML_SUFFIXES = (".yaml", ".yml")


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_spec(source: str | Path, client: httpx.Client | None = None) -> dict[str, Any]:
    """Load and validate an OpenAPI/Swagger document from a file path or URL."""
    source = str(source)
    if is_url(source):
        text = _fetch(source, client)
    else:
        text = _read(source)

    spec = _parse(text, source)
    validate_spec(spec)
    logger.info(
        "Loaded spec %s (%d paths, %d schemas)",
        source, len(spec["paths"]), len(get_schemas(spec)),
    )
    return spec


def _fetch(url: str, client: httpx.Client | None) -> str:
    logger.info("Fetching spec from %s", url)
    try:
        if client is not None:
            resp = client.get(url)
        else:
            resp = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(
            f"Failed to fetch spec from {url}: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise SpecLoadError(f"Failed to fetch spec from {url}: {exc}") from exc
    return resp.text


def _read(path: str) -> str:
    spec_file = Path(path).expanduser().resolve()
    logger.info("Reading spec from %s", spec_file)
    if not spec_file.is_file():
        raise SpecLoadError(f"File not found: {spec_file}")
    return spec_file.read_text(encoding="utf-8")


def _parse(text: str, source: str) -> Any:
    if source.lower().split("?", 1)[0].endswith(_YAML_SUFFIXES):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SpecLoadError(f"Invalid YAML in {source}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SpecLoadError(f"Invalid JSON in {source}: {exc}") from exc


def validate_spec(spec: Any) -> None:
    """Minimal structural checks, not full OpenAPI validation."""
    if not isinstance(spec, dict):
        raise SpecLoadError("Invalid spec: document is not a JSON object")
    if not isinstance(spec.get("paths"), dict):
        raise SpecLoadError('Invalid spec: missing "paths" property')
    if not spec.get("openapi") and not spec.get("swagger"):
        raise SpecLoadError("Invalid spec: missing version information")


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the document."""
    return spec.get("paths", {})


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Component schemas (OpenAPI 3) or definitions (Swagger 2)."""
    components = spec.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if schemas is None:
        schemas = spec.get("definitions")
    return schemas if isinstance(schemas, dict) else {}


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def resolve_pointer(spec: dict[str, Any], ref: str) -> Any | None:
    """Walk a local #/a/b/c pointer. Returns None when any segment is missing."""
    if not ref.startswith("#"):
        return None
    node: Any = spec
    for raw in ref[1:].split("/"):
        if raw == "":
            continue
        part = _unescape(raw)
        if isinstance(node, dict):
            if part not in node:
                return None
            node = node[part]
        elif isinstance(node, list):
            try:
                node = node[int(part)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return node


class RefResolver:
    """Memoizing $ref resolver bound to one loaded document."""

    def __init__(self, spec: dict[str, Any]) -> None:
        self.spec = spec
        self._cache: dict[str, dict[str, Any]] = {}
        self.hits = 0

    def resolve(self, ref: str) -> dict[str, Any] | None:
        if ref in self._cache:
            self.hits += 1
            return self._cache[ref]
        node = resolve_pointer(self.spec, ref)
        if not isinstance(node, dict):
            logger.debug("Unresolvable $ref %s", ref)
            return None
        self._cache[ref] = node
        return node

    def deref(self, schema: Any) -> Any:
        """Follow $ref chains on a node; returns None on a dead or cyclic chain."""
        seen: set[str] = set()
        while isinstance(schema, dict) and "$ref" in schema:
            ref = schema["$ref"]
            if not isinstance(ref, str):
                return None
            if ref in seen:
                logger.warning("Circular $ref chain at %s", ref)
                return None
            seen.add(ref)
            schema = self.resolve(ref)
        return schema

    def __contains__(self, ref: str) -> bool:
        return ref in self._cache

    def __len__(self) -> int:
        return len(self._cache)
