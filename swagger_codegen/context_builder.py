"""Build Jinja2 template contexts from the catalog and generated models.

Assigns each operation an endpoint key, builds its path builder and hook
definition, and assembles the context dicts for the endpoint, hook and
index templates.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Any

from .catalog import Operation, extract_path_params
from .config import GeneratorConfig
from .models import ModelSet, OperationTypes
from .naming import get_hook_name, get_method_name, to_camel_case, to_pascal_case

# axios methods taking (url, data, config); the rest take (url, config)
_BODY_METHODS = {"post", "put", "patch"}
_AXIOS_METHODS = {"get", "delete", "head", "options", "post", "put", "patch"}

# Hooks state type when the operation documents no response schema
UNKNOWN_RESPONSE = "unknown"


def endpoints_const(tag: str) -> str:
    return f"{to_camel_case(tag)}Endpoints"


def relative_import(from_dir: Path, target: Path) -> str:
    """TS module specifier for `target` as seen from a file in `from_dir`."""
    rel = posixpath.relpath(target.as_posix(), from_dir.as_posix())
    return rel if rel.startswith(".") else f"./{rel}"


def derive_method_name(operation: Operation) -> str:
    """Endpoint key: cleaned operationId, else method + path.

    GET /customers/{id} without an operationId -> getCustomersById
    """
    if operation.operation_id:
        name = get_method_name(operation.operation_id)
        if name:
            return name

    parts = [operation.method.lower()]
    for segment in operation.path.split("/"):
        if not segment or segment == "api":
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append(f"by {segment[1:-1]}")
        else:
            parts.append(segment)
    return to_camel_case(" ".join(parts))


def _comment(text: str) -> str:
    return " ".join(text.split()).replace("*/", "*\\/")


def _make_description(operation: Operation) -> str:
    """Doc line for an endpoint: summary, or the description's first sentence."""
    if operation.summary:
        return _comment(operation.summary)
    if operation.description:
        return _comment(operation.description.split(".")[0])
    return ""


def _deduplicate_method_names(entries: list[dict[str, Any]]) -> None:
    """Make endpoint keys unique within a tag: getX, getXPost, getXPost2, ..."""
    taken: set[str] = set()
    for entry in entries:
        name = entry["method_name"]
        if name in taken:
            name = f"{name}{entry['http_method'].capitalize()}"
            base, counter = name, 2
            while name in taken:
                name = f"{base}{counter}"
                counter += 1
        entry["method_name"] = name
        taken.add(name)


def _path_builder(path: str) -> tuple[list[str], str]:
    """Identifiers for the path params and the template literal body.

    /users/{user-id}/posts -> (['userId'], '/users/${userId}/posts')
    """
    args: list[str] = []
    template = path.replace("`", "\\`")
    for name in extract_path_params(path):
        ident = to_camel_case(name) or f"param{len(args) + 1}"
        if ident not in args:
            args.append(ident)
        template = template.replace("{" + name + "}", "${" + ident + "}")
    return args, template


def _axios_call(entry: dict[str, Any], include_headers: bool) -> str:
    response = entry["response_type"]
    config_parts = (["params"] if entry["params_type"] else []) + (["headers"] if include_headers else [])
    config_obj = "{ " + ", ".join(config_parts) + " }" if config_parts else None
    method = entry["http_method"]

    if method not in _AXIOS_METHODS:
        fields = [f"url: {entry['path_call']}", f"method: '{entry['http_method_upper']}'"]
        if entry["request_type"]:
            fields.append("data: payload")
        fields.extend(config_parts)
        return f"axiosInstance.request<{response}, {response}>({{ {', '.join(fields)} }})"

    args = [entry["path_call"]]
    generics = [response, response]
    if method in _BODY_METHODS:
        if entry["request_type"]:
            generics.append(entry["request_type"])
        if entry["request_type"] or config_obj:
            args.append("payload" if entry["request_type"] else "undefined")
    if config_obj:
        args.append(config_obj)
    return f"axiosInstance.{method}<{', '.join(generics)}>({', '.join(args)})"


def _operation_entry(operation: Operation, types: OperationTypes | None) -> dict[str, Any]:
    path_args, path_template = _path_builder(operation.path)
    return {
        "method_name": derive_method_name(operation),
        "http_method": operation.method.lower(),
        "http_method_upper": operation.method,
        "path": operation.path,
        "path_args": path_args,
        "path_signature": ", ".join(f"{arg}: string | number" for arg in path_args),
        "path_template": path_template,
        "description": _make_description(operation),
        "request_type": types.request if types else None,
        "response_type": (types.response if types else None) or UNKNOWN_RESPONSE,
        "params_type": types.params if types else None,
    }


def _finalize_entry(entry: dict[str, Any], const: str, include_headers: bool, base_url: str) -> None:
    """Fill in everything derived from the (deduplicated) method name."""
    method_name = entry["method_name"]
    entry["pascal_name"] = to_pascal_case(method_name)
    entry["hook_name"] = get_hook_name(method_name)
    entry["return_type_name"] = f"TUse{entry['pascal_name']}"
    entry["path_call"] = f"{const}.{method_name}({', '.join(entry['path_args'])})"
    entry["fetch_url"] = "`${" + base_url + " || ''}${" + entry["path_call"] + "}`"

    params = [f"{arg}: string | number" for arg in entry["path_args"]]
    if entry["request_type"]:
        params.append(f"payload: {entry['request_type']}")
    if entry["params_type"]:
        params.append(f"params?: {entry['params_type']}")
    if include_headers:
        params.append("headers?: Record<string, string>")
    entry["signature"] = ", ".join(params)
    entry["axios_call"] = _axios_call(entry, include_headers)


def _type_names(entry: dict[str, Any]) -> list[str]:
    names = []
    for key in ("request_type", "response_type", "params_type"):
        value = entry[key]
        if value and value != UNKNOWN_RESPONSE:
            names.append(value.replace("[]", ""))
    return names


def _model_imports(
    entries: list[dict[str, Any]],
    models: ModelSet,
    from_dir: Path,
    config: GeneratorConfig,
) -> list[dict[str, Any]]:
    """Type imports grouped by the model module that declares each name."""
    by_module: dict[str, list[str]] = {}
    for entry in entries:
        for name in _type_names(entry):
            module = models.modules_by_name.get(name)
            if module is None:
                continue
            names = by_module.setdefault(module, [])
            if name not in names:
                names.append(name)

    return [
        {"path": relative_import(from_dir, config.models_path / module), "names": names}
        for module, names in by_module.items()
    ]


def build_tag_context(
    tag: str,
    operations: list[Operation],
    models: ModelSet,
    config: GeneratorConfig,
) -> dict[str, Any]:
    """Context shared by the endpoint file and the hook files of one tag."""
    const = endpoints_const(tag)
    include_headers = config.hooks.include_headers
    base_url = config.axios_config.base_url_placeholder

    entries = [_operation_entry(op, models.types.get(op)) for op in operations]
    _deduplicate_method_names(entries)
    for entry in entries:
        _finalize_entry(entry, const, include_headers, base_url)

    hooks_dir = config.hooks_path / tag
    return {
        "tag": tag,
        "tag_pascal": to_pascal_case(tag),
        "endpoints_const": const,
        "operations": entries,
        "use_fetch": config.hooks.use_fetch,
        "include_headers": include_headers,
        "hooks_dir": hooks_dir,
        "combined_hook_name": f"use{to_pascal_case(tag)}",
        "endpoints_import": relative_import(hooks_dir, config.endpoints_path / tag),
        "axios_import": relative_import(hooks_dir, config.axios_config_dir / "axiosInstance"),
        "model_imports": _model_imports(entries, models, hooks_dir, config),
    }


def hook_context(tag_context: dict[str, Any], entry: dict[str, Any], models: ModelSet,
                 config: GeneratorConfig) -> dict[str, Any]:
    """Context for a single-operation hook file."""
    return {
        **tag_context,
        "op": entry,
        "model_imports": _model_imports([entry], models, tag_context["hooks_dir"], config),
    }


def build_index_context(catalog: dict[str, list[Operation]], models: ModelSet) -> dict[str, Any]:
    return {
        "modules": list(models.declarations),
        "tags": [{"name": tag, "const": endpoints_const(tag)} for tag in catalog],
    }
