"""Generate model declarations for every cataloged operation.

Per operation, up to three schemas are located in the document and handed to
the SchemaTypeResolver under the operation's resource name:

  Request  - requestBody (OpenAPI 3), or body / formData parameters (Swagger 2)
  Response - 200, 201, other 2xx, then "default"
  Params   - query parameters, path-level ones included

Declarations are grouped per resource module (getWidgets -> Widget ->
"widget"); one model file is written per module.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from .catalog import Operation, get_operation, get_path_item
from .loader import RefResolver
from .naming import extract_resource_name, to_camel_case, to_pascal_case
from .schema_parser import Declaration, SchemaTypeResolver

logger = logging.getLogger(__name__)

# Preferred media types; anything else with a schema is the fallback
_CONTENT_TYPES = ("application/json", "*/*")

# Swagger 2.0 non-body parameters carry their type on the parameter itself
_SWAGGER2_SCHEMA_KEYS = ("type", "format", "items", "enum", "nullable")

# Declared type names in a declaration body; property keys are followed by ":" or "?:"
_TYPE_NAME_RE = re.compile(r"\bI[A-Z][A-Za-z0-9_]*\b(?!\??:)")


@dataclass(frozen=True)
class OperationTypes:
    """Type expressions an operation's endpoint and hook code refer to."""

    resource: str
    module: str
    request: str | None = None
    response: str | None = None
    params: str | None = None


@dataclass
class ModelSet:
    """Everything model generation produced in one pass."""

    declarations: dict[str, list[Declaration]] = field(default_factory=dict)
    modules_by_name: dict[str, str] = field(default_factory=dict)
    types: dict[Operation, OperationTypes] = field(default_factory=dict)

    def add(self, module: str, declarations: list[Declaration]) -> None:
        for declaration in declarations:
            self.declarations.setdefault(module, []).append(declaration)
            self.modules_by_name[declaration.name] = module

    @property
    def declaration_count(self) -> int:
        return len(self.modules_by_name)

    def imports(self, module: str) -> dict[str, list[str]]:
        """Names the module's declarations use that other modules declare, by module."""
        local = {d.name for d in self.declarations.get(module, [])}
        found: dict[str, list[str]] = {}
        for declaration in self.declarations.get(module, []):
            for name in _TYPE_NAME_RE.findall(declaration.content):
                owner = self.modules_by_name.get(name)
                if owner is None or owner == module or name in local:
                    continue
                names = found.setdefault(owner, [])
                if name not in names:
                    names.append(name)
        return found

    def render(self, module: str) -> str:
        """Model file text: type imports, then declarations separated by blank lines."""
        body = "\n".join(d.content for d in self.declarations.get(module, []))
        imports = self.imports(module)
        if not imports:
            return body
        lines = [
            f"import type {{ {', '.join(names)} }} from './{owner}';"
            for owner, names in imports.items()
        ]
        return "\n".join(lines) + "\n\n" + body


def resource_for(operation: Operation) -> str:
    """Base name for an operation's declarations."""
    if operation.operation_id:
        return extract_resource_name(operation.operation_id)
    return to_pascal_case(operation.tag)


def _content_schema(content: Any) -> dict[str, Any] | None:
    if not isinstance(content, dict):
        return None
    for content_type in _CONTENT_TYPES:
        media = content.get(content_type)
        if isinstance(media, dict) and isinstance(media.get("schema"), dict):
            return media["schema"]
    for media in content.values():
        if isinstance(media, dict) and isinstance(media.get("schema"), dict):
            return media["schema"]
    return None


def _parameter_schema(param: dict[str, Any]) -> dict[str, Any]:
    schema = param.get("schema")
    if not isinstance(schema, dict):
        schema = {k: param[k] for k in _SWAGGER2_SCHEMA_KEYS if k in param}
    description = param.get("description")
    if isinstance(description, str) and description:
        schema = {**schema, "description": description}
    return schema


def object_from_parameters(params: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap parameters into one object schema, keeping their order."""
    properties: dict[str, Any] = {}
    required: list[str] = []
    for param in params:
        name = param["name"]
        properties[name] = _parameter_schema(param)
        if param.get("required") is True:
            required.append(name)
    return {"type": "object", "properties": properties, "required": required}


class ModelGenerator:
    """Runs one model generation pass over a catalog."""

    def __init__(
        self,
        spec: dict[str, Any],
        refs: RefResolver | None = None,
        resolver: SchemaTypeResolver | None = None,
    ) -> None:
        self.spec = spec
        self.refs = refs if refs is not None else RefResolver(spec)
        self.resolver = resolver if resolver is not None else SchemaTypeResolver(self.refs)

    def generate(self, catalog: dict[str, list[Operation]]) -> ModelSet:
        self.resolver.reset()
        models = ModelSet()
        for operations in catalog.values():
            for operation in operations:
                models.types[operation] = self._operation_models(operation, models)

        logger.info(
            "Generated %d declarations in %d model files",
            models.declaration_count, len(models.declarations),
        )
        return models

    def _operation_models(self, operation: Operation, models: ModelSet) -> OperationTypes:
        resource = resource_for(operation)
        module = to_camel_case(resource)
        label = f"{operation.method} {operation.original_path}"
        found: dict[str, str | None] = {}

        for suffix, schema in (
            ("Request", self.request_schema(operation)),
            ("Response", self.response_schema(operation)),
            ("Params", self.params_schema(operation)),
        ):
            if schema is None:
                found[suffix] = None
                continue
            models.add(module, self.resolver.resolve(schema, resource, suffix, f"{label} {suffix.lower()}"))
            found[suffix] = self.resolver.type_reference(schema, resource, suffix)

        return OperationTypes(
            resource=resource,
            module=module,
            request=found["Request"],
            response=found["Response"],
            params=found["Params"],
        )

    # -- schema lookup -----------------------------------------------------

    def parameters(self, operation: Operation) -> list[dict[str, Any]]:
        """Path-level and operation parameters; the operation wins on (name, in)."""
        merged: dict[tuple[str, Any], dict[str, Any]] = {}
        sources = (
            get_path_item(self.spec, operation).get("parameters"),
            get_operation(self.spec, operation).get("parameters"),
        )
        for source in sources:
            if not isinstance(source, list):
                continue
            for param in source:
                param = self.refs.deref(param)
                if isinstance(param, dict) and isinstance(param.get("name"), str):
                    merged[(param["name"], param.get("in"))] = param
        return list(merged.values())

    def request_schema(self, operation: Operation) -> dict[str, Any] | None:
        raw = get_operation(self.spec, operation)
        body = self.refs.deref(raw.get("requestBody"))
        if isinstance(body, dict):
            schema = _content_schema(body.get("content"))
            if schema is not None:
                return schema

        params = self.parameters(operation)
        for param in params:
            if param.get("in") == "body" and isinstance(param.get("schema"), dict):
                return param["schema"]
        form = [p for p in params if p.get("in") == "formData"]
        if form:
            return object_from_parameters(form)
        return None

    def response_schema(self, operation: Operation) -> dict[str, Any] | None:
        responses = get_operation(self.spec, operation).get("responses")
        if not isinstance(responses, dict):
            return None
        # YAML specs may key responses by int
        responses = {str(code): value for code, value in responses.items()}

        preferred = [c for c in ("200", "201") if c in responses]
        other_2xx = sorted(c for c in responses if c.startswith("2") and c not in ("200", "201"))
        for code in preferred + other_2xx + ["default"]:
            response = self.refs.deref(responses.get(code))
            if not isinstance(response, dict):
                continue
            schema = _content_schema(response.get("content"))
            if schema is None and isinstance(response.get("schema"), dict):
                schema = response["schema"]
            if schema is not None:
                return schema
        return None

    def params_schema(self, operation: Operation) -> dict[str, Any] | None:
        query = [p for p in self.parameters(operation) if p.get("in") == "query"]
        if not query:
            return None
        return object_from_parameters(query)
