"""Naming helpers shared by every generator stage.

Operation ids, tags and property names arrive in whatever style the API
author used. Everything generated goes through these functions:

  getWidgets                          -> resource Widget, module widget
  productCreateProduct                -> createProduct
  UserController_getUser              -> getUser
  get_interface_name("User", "Params") -> IUserParams
  strip_base_path("/v1/api/categories", ["/v1/api"]) -> /categories
"""

from __future__ import annotations

import re

# Irregular plurals, checked before the suffix rules
_IRREGULAR_SINGULARS: dict[str, str] = {
    "people": "person",
    "men": "man",
    "women": "woman",
    "children": "child",
    "teeth": "tooth",
    "feet": "foot",
    "mice": "mouse",
    "geese": "goose",
}

# Framework noise removed from operation ids (NestJS, Spring, ...)
_OPERATION_ID_NOISE = ("Controller", "Service", "Handler", "Manager", "Processor")

# Leading words that describe the action, not the resource
_ACTION_VERBS = frozenset({
    "get", "post", "put", "delete", "patch", "create", "update", "remove",
    "find", "fetch", "search", "list", "add", "set", "modify", "change",
    "retrieve", "query", "load",
})

# Acronym runs, capitalised words, lower-case runs, digit runs
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def split_words(text: str) -> list[str]:
    """Split an identifier-ish string into words.

    Separators are anything that is not a letter or digit; inside a chunk,
    words break on case changes and digit runs.
    """
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(text):
        words.extend(_WORD_RE.findall(chunk))
    return words


def capitalize(text: str) -> str:
    """Upper-case the first character and leave the rest alone."""
    return text[:1].upper() + text[1:]


def to_pascal_case(text: str) -> str:
    return "".join(word.capitalize() for word in split_words(text))


def to_camel_case(text: str) -> str:
    pascal = to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def singularize(word: str) -> str:
    """Return the singular form of an English plural.

    Matching is case-insensitive; a capitalised word stays capitalised.
    Rule based, so words that only look plural ("status", "analysis")
    can come out wrong.
    """
    if not word:
        return word
    lower = word.lower()

    irregular = _IRREGULAR_SINGULARS.get(lower)
    if irregular is not None:
        return capitalize(irregular) if word[0].isupper() else irregular

    if lower.endswith("ies"):
        return word[:-3] + "y"
    if lower.endswith("ves"):
        return word[:-3] + "f"
    if lower.endswith(("ses", "xes", "ches", "shes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return word[:-1]
    return word


def clean_operation_id(operation_id: str) -> str:
    """Strip framework suffixes and a repeated resource prefix.

    assignmentCreateAssignmentForOrder -> createAssignmentForOrder
    categoryControllerGetCategoryById  -> getCategoryById
    """
    cleaned = operation_id
    for token in _OPERATION_ID_NOISE:
        cleaned = cleaned.replace(token, "")

    words = split_words(cleaned)
    if len(words) >= 2:
        leading = singularize(words[0].lower())
        if any(singularize(w.lower()) == leading for w in words[1:]):
            words = words[1:]

    return to_camel_case(" ".join(words))


def extract_resource_name(operation_id: str) -> str:
    """Derive the resource an operation works on.

    getWidgets -> Widget, categoryGetCategoryById -> Category
    """
    words = split_words(clean_operation_id(operation_id))
    for word in words:
        if word.lower() not in _ACTION_VERBS:
            return singularize(capitalize(word)) or capitalize(word)
    if words:
        return capitalize(words[0])
    return "Unknown"


def get_interface_name(base_name: str, suffix: str = "") -> str:
    """IWidgetResponse, IWidgetRequest, IWidgetParams, IUserAddress."""
    return f"I{to_pascal_case(base_name)}{suffix}"


def sanitize_tag_name(tag: str) -> str:
    """Tag as an identifier and file stem: "Pet Store" -> petStore."""
    return to_camel_case(tag) or "default"


def strip_base_path(path: str, base_paths: list[str]) -> str:
    """Remove the first matching prefix; the result always starts with '/'."""
    for base_path in base_paths:
        if base_path and path.startswith(base_path):
            stripped = path[len(base_path):]
            return stripped if stripped.startswith("/") else "/" + stripped
    return path


def get_method_name(operation_id: str) -> str:
    """categoryControllerGetCategoryById -> getCategoryById"""
    return clean_operation_id(operation_id)


def get_hook_name(method_name: str) -> str:
    """getCategoryById -> useGetCategoryById"""
    return f"use{to_pascal_case(method_name)}"


def ref_name(pointer: str) -> str:
    """Terminal segment of a $ref: #/components/schemas/Widget -> Widget."""
    return pointer.rstrip("/").rsplit("/", 1)[-1]


def is_identifier(name: str) -> bool:
    """Whether a property key can be emitted without quotes."""
    return bool(_IDENTIFIER_RE.match(name))
