"""Turn OpenAPI schemas into TypeScript declarations.

Handles:
- $ref indirection (transparent at the top level, named for properties)
- allOf merging into one interface
- oneOf/anyOf as a union type alias
- nested objects flattened into separate named interfaces
- arrays, enums, additionalProperties maps, primitives
- nullable, readOnly/writeOnly and description doc comments

Each schema is classified into a SchemaKind before dispatch, in a fixed
priority order, so every node lands in exactly one branch. Every emitted
name is claimed in a NameRegistry first: a name is declared at most once
per pass, which also stops self-referencing schemas from recursing forever.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Iterator

from .errors import SchemaDepthError
from .loader import RefResolver
from .naming import get_interface_name, is_identifier, ref_name, to_pascal_case

logger = logging.getLogger(__name__)

MAX_DEPTH = 64

ANY = "any"
OPEN_RECORD = "Record<string, any>"

_PRIMITIVE_TYPES: dict[str, str] = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}


class SchemaKind(enum.Enum):
    REFERENCE = "reference"
    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"
    MAP = "map"
    PRIMITIVE = "primitive"
    UNKNOWN = "unknown"


# Kinds that get a named declaration when referenced from a property
_STRUCTURAL_KINDS = frozenset({SchemaKind.OBJECT, SchemaKind.ALL_OF, SchemaKind.ONE_OF})


@dataclass(frozen=True)
class Declaration:
    """One generated TypeScript interface or type alias."""

    name: str
    content: str
    origin: str = ""


class NameRegistry:
    """Declaration names already emitted in the current pass."""

    def __init__(self) -> None:
        self._names: set[str] = set()

    def claim(self, name: str) -> bool:
        """Register a name. False when it was already taken."""
        if name in self._names:
            return False
        self._names.add(name)
        return True

    def reset(self) -> None:
        self._names.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))


def _members(schema: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = schema.get(key)
    if not isinstance(value, list):
        return []
    return [m for m in value if isinstance(m, dict)]


def _items(schema: dict[str, Any]) -> dict[str, Any]:
    items = schema.get("items")
    return items if isinstance(items, dict) else {}


def schema_type(schema: dict[str, Any]) -> tuple[str | None, bool]:
    """Primary type tag and nullability, accepting 3.1 type lists."""
    raw = schema.get("type")
    nullable = bool(schema.get("nullable", False))
    if isinstance(raw, list):
        non_null = [t for t in raw if t != "null"]
        if len(non_null) < len(raw):
            nullable = True
        raw = non_null[0] if non_null else ("null" if raw else None)
    return (raw if isinstance(raw, str) else None), nullable


def classify(schema: Any) -> SchemaKind:
    """Pick the single branch a schema node is handled by."""
    if not isinstance(schema, dict) or not schema:
        return SchemaKind.UNKNOWN
    if isinstance(schema.get("$ref"), str):
        return SchemaKind.REFERENCE
    if _members(schema, "allOf"):
        return SchemaKind.ALL_OF
    if _members(schema, "oneOf") or _members(schema, "anyOf"):
        return SchemaKind.ONE_OF
    if isinstance(schema.get("enum"), list) and schema["enum"]:
        return SchemaKind.ENUM

    type_, _ = schema_type(schema)
    if type_ == "array" or "items" in schema:
        return SchemaKind.ARRAY
    if isinstance(schema.get("properties"), dict) and schema["properties"]:
        return SchemaKind.OBJECT
    additional = schema.get("additionalProperties")
    if additional is True or isinstance(additional, dict):
        return SchemaKind.MAP
    if type_ in _PRIMITIVE_TYPES:
        return SchemaKind.PRIMITIVE
    return SchemaKind.UNKNOWN


def _doc_comment(
    description: Any,
    indent: str = "",
    read_only: Any = False,
    write_only: Any = False,
) -> str:
    parts: list[str] = []
    if isinstance(description, str) and description.strip():
        parts.append(" ".join(description.split()).replace("*/", "*\\/"))
    if read_only is True:
        parts.append("@readonly")
    if write_only is True:
        parts.append("@writeonly")
    if not parts:
        return ""
    return f"{indent}/** {' '.join(parts)} */\n"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    return json.dumps(value)


def _property_key(name: str) -> str:
    return name if is_identifier(name) else _quote(name)


def _parenthesize(ts_type: str) -> str:
    if " | " in ts_type or " & " in ts_type:
        return f"({ts_type})"
    return ts_type


def _with_null(ts_type: str) -> str:
    if ts_type == ANY or "null" in ts_type.split(" | "):
        return ts_type
    return f"{ts_type} | null"


def _open_interface(name: str, description: Any = None) -> str:
    return f"{_doc_comment(description)}export interface {name} {{\n  [key: string]: any;\n}}\n"


class SchemaTypeResolver:
    """Expands schemas into Declarations, deduplicated by name per pass."""

    def __init__(
        self,
        refs: RefResolver,
        registry: NameRegistry | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self.refs = refs
        self.registry = registry if registry is not None else NameRegistry()
        self.max_depth = max_depth

    def reset(self) -> None:
        """Forget every declared name. Call at the start of each pass."""
        self.registry.reset()

    def resolve(
        self,
        schema: dict[str, Any],
        base_name: str,
        suffix: str = "",
        origin: str = "",
    ) -> list[Declaration]:
        """Declarations for a schema named I{base_name}{suffix}.

        Nested declarations come before the ones that use them. An empty
        list means the name was already declared earlier in the pass.
        """
        return self._declare(schema, base_name, suffix, origin, 0, ())

    def type_reference(self, schema: dict[str, Any], base_name: str, suffix: str = "") -> str:
        """Type expression for a top-level schema: IWidgetResponse or IWidgetResponse[]."""
        arrays = 0
        chain: tuple[str, ...] = ()
        while True:
            kind = classify(schema)
            if kind is SchemaKind.REFERENCE:
                schema, chain = self._follow(schema, chain)
                if schema is None:
                    break
            elif kind is SchemaKind.ARRAY:
                arrays += 1
                schema = _items(schema)
            else:
                break
        return get_interface_name(base_name, suffix) + "[]" * arrays

    # -- declarations ------------------------------------------------------

    def _follow(
        self, schema: dict[str, Any], chain: tuple[str, ...]
    ) -> tuple[dict[str, Any] | None, tuple[str, ...]]:
        """Resolve a $ref chain. None on a missing target or a cycle."""
        while classify(schema) is SchemaKind.REFERENCE:
            ref = schema["$ref"]
            if ref in chain:
                logger.warning("Circular $ref %s", ref)
                return None, chain
            resolved = self.refs.resolve(ref)
            if resolved is None:
                return None, chain
            schema, chain = resolved, chain + (ref,)
        return schema, chain

    def _claim_open(self, name: str, schema: dict[str, Any], origin: str) -> list[Declaration]:
        if not self.registry.claim(name):
            return []
        return [Declaration(name, _open_interface(name, schema.get("description")), origin)]

    def _declare(
        self,
        schema: dict[str, Any],
        base_name: str,
        suffix: str,
        origin: str,
        depth: int,
        chain: tuple[str, ...],
    ) -> list[Declaration]:
        if depth > self.max_depth:
            raise SchemaDepthError(origin, self.max_depth)

        kind = classify(schema)
        if kind is SchemaKind.REFERENCE:
            resolved, ref_chain = self._follow(schema, chain)
            if resolved is None:
                logger.warning(
                    "Cannot resolve %s for %s, emitting an open type",
                    schema["$ref"], get_interface_name(base_name, suffix),
                )
                return self._claim_open(get_interface_name(base_name, suffix), schema, origin)
            return self._declare(resolved, base_name, suffix, ref_chain[-1], depth + 1, ref_chain)

        if kind is SchemaKind.ARRAY:
            return self._declare(_items(schema), base_name, suffix, f"{origin}/items", depth + 1, chain)

        name = get_interface_name(base_name, suffix)
        if not self.registry.claim(name):
            logger.debug("%s already declared, skipping %s", name, origin)
            return []

        if kind is SchemaKind.ALL_OF:
            merged = self._merge_all_of(schema, chain)
            if merged["properties"]:
                return self._interface(name, merged, base_name, origin, depth)
        elif kind is SchemaKind.ONE_OF:
            return self._union(name, schema, base_name, origin, depth)
        elif kind is SchemaKind.OBJECT:
            return self._interface(name, schema, base_name, origin, depth)

        return [Declaration(name, _open_interface(name, schema.get("description")), origin)]

    def _merge_all_of(self, schema: dict[str, Any], chain: tuple[str, ...]) -> dict[str, Any]:
        """Flatten allOf members (and the node's own properties) into one object."""
        properties: dict[str, Any] = {}
        required: list[str] = []

        parts: list[tuple[dict[str, Any], tuple[str, ...]]] = []
        for member in _members(schema, "allOf"):
            resolved, member_chain = self._follow(member, chain)
            if resolved is None:
                logger.warning("Skipping unresolvable allOf member %s", member.get("$ref"))
                continue
            parts.append((resolved, member_chain))
        parts.append(({k: v for k, v in schema.items() if k != "allOf"}, chain))

        for part, part_chain in parts:
            if classify(part) is SchemaKind.ALL_OF:
                part = self._merge_all_of(part, part_chain)
            props = part.get("properties")
            if isinstance(props, dict):
                properties.update(props)
            for key in part.get("required") or []:
                if isinstance(key, str) and key not in required:
                    required.append(key)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
            "description": schema.get("description"),
        }

    def _union(
        self, name: str, schema: dict[str, Any], base_name: str, origin: str, depth: int
    ) -> list[Declaration]:
        nested: list[Declaration] = []
        key = "oneOf" if _members(schema, "oneOf") else "anyOf"
        types: list[str] = []
        for index, member in enumerate(_members(schema, key)):
            member_type = self._property_type(
                member, f"{base_name}Option{index + 1}", f"{origin}/{key}/{index}",
                depth + 1, (), nested,
            )
            if member_type not in types:
                types.append(member_type)

        body = " | ".join(types) or ANY
        content = f"{_doc_comment(schema.get('description'))}export type {name} = {body};\n"
        return nested + [Declaration(name, content, origin)]

    def _interface(
        self, name: str, schema: dict[str, Any], base_name: str, origin: str, depth: int
    ) -> list[Declaration]:
        nested: list[Declaration] = []
        required = {r for r in schema.get("required") or [] if isinstance(r, str)}
        lines: list[str] = []

        for prop_name, prop_schema in schema["properties"].items():
            prop_name = str(prop_name)
            prop_type = self._property_type(
                prop_schema, f"{base_name}{to_pascal_case(prop_name)}",
                f"{origin}/properties/{prop_name}", depth + 1, (), nested,
            )
            meta = prop_schema if isinstance(prop_schema, dict) else {}
            lines.append(_doc_comment(
                meta.get("description"), "  ", meta.get("readOnly"), meta.get("writeOnly"),
            ))
            optional = "" if prop_name in required else "?"
            lines.append(f"  {_property_key(prop_name)}{optional}: {prop_type};\n")

        content = (
            f"{_doc_comment(schema.get('description'))}"
            f"export interface {name} {{\n{''.join(lines)}}}\n"
        )
        return nested + [Declaration(name, content, origin)]

    # -- property types ----------------------------------------------------

    def _property_type(
        self,
        schema: Any,
        child_base: str,
        origin: str,
        depth: int,
        chain: tuple[str, ...],
        nested: list[Declaration],
    ) -> str:
        """Type of a property; nested declarations are appended to `nested`."""
        if depth > self.max_depth:
            raise SchemaDepthError(origin, self.max_depth)
        if not isinstance(schema, dict):
            return ANY

        kind = classify(schema)
        ts_type = self._inline_type(kind, schema, child_base, origin, depth, chain, nested)
        _, nullable = schema_type(schema)
        return _with_null(ts_type) if nullable else ts_type

    def _inline_type(
        self,
        kind: SchemaKind,
        schema: dict[str, Any],
        child_base: str,
        origin: str,
        depth: int,
        chain: tuple[str, ...],
        nested: list[Declaration],
    ) -> str:
        if kind is SchemaKind.REFERENCE:
            ref = schema["$ref"]
            target, ref_chain = self._follow(schema, chain)
            if target is None:
                logger.warning("Cannot resolve %s at %s, typing it as any", ref, origin)
                return ANY
            if classify(target) in _STRUCTURAL_KINDS:
                target_name = ref_name(ref)
                nested.extend(self._declare(target, target_name, "", ref, depth + 1, ref_chain))
                return get_interface_name(target_name)
            return self._property_type(target, child_base, ref, depth + 1, ref_chain, nested)

        if kind in (SchemaKind.OBJECT, SchemaKind.ALL_OF):
            nested.extend(self._declare(schema, child_base, "", origin, depth + 1, chain))
            return get_interface_name(child_base)

        if kind is SchemaKind.ONE_OF:
            key = "oneOf" if _members(schema, "oneOf") else "anyOf"
            types: list[str] = []
            for index, member in enumerate(_members(schema, key)):
                member_type = self._property_type(
                    member, f"{child_base}Option{index + 1}", f"{origin}/{key}/{index}",
                    depth + 1, chain, nested,
                )
                if member_type not in types:
                    types.append(member_type)
            return " | ".join(types) or ANY

        if kind is SchemaKind.ENUM:
            literals: list[str] = []
            for value in schema["enum"]:
                literal = _literal(value)
                if literal not in literals:
                    literals.append(literal)
            return " | ".join(literals)

        if kind is SchemaKind.ARRAY:
            item_type = self._property_type(
                _items(schema), f"{child_base}Item", f"{origin}/items", depth + 1, chain, nested,
            )
            return f"{_parenthesize(item_type)}[]"

        if kind is SchemaKind.MAP:
            additional = schema.get("additionalProperties")
            value_type = ANY
            if isinstance(additional, dict) and additional:
                value_type = self._property_type(
                    additional, f"{child_base}Value", f"{origin}/additionalProperties",
                    depth + 1, chain, nested,
                )
            return f"Record<string, {value_type}>"

        type_, _ = schema_type(schema)
        if kind is SchemaKind.PRIMITIVE:
            return _PRIMITIVE_TYPES[type_]
        if type_ == "object":
            return OPEN_RECORD
        if type_ is not None:
            logger.warning("Unknown schema type %r at %s, typing it as any", type_, origin)
        return ANY
