"""Deep merge of two OpenAPI / Swagger documents.

``paths``, ``tags`` and ``components`` get section-specific handling;
everything else is merged recursively. Inputs are never mutated: every
value placed in the result is a copy.
"""

import json
from copy import deepcopy
from typing import Any

COMPONENT_TYPES = (
    "schemas",
    "responses",
    "parameters",
    "examples",
    "requestBodies",
    "headers",
    "securitySchemes",
    "links",
    "callbacks",
)


def deep_merge_specs(target: Any, source: Any) -> Any:
    """Merge ``source`` into ``target`` and return a new document."""
    if not isinstance(target, dict) or not isinstance(source, dict):
        return deepcopy(source if source is not None else target)

    result = deepcopy(target)
    for key, value in source.items():
        if key == "components":
            result[key] = merge_components(target.get(key), value)
        elif key == "paths":
            result[key] = merge_paths(target.get(key), value)
        elif key == "tags":
            result[key] = merge_tags(target.get(key), value)
        elif key in target:
            current = target[key]
            if isinstance(current, list) and isinstance(value, list):
                result[key] = merge_arrays(current, value)
            elif isinstance(current, dict) and isinstance(value, dict):
                result[key] = deep_merge_specs(current, value)
            else:
                result[key] = deepcopy(value)
        else:
            result[key] = deepcopy(value)
    return result


def merge_components(target: Any, source: Any) -> Any:
    """Shallow-merge each component type; source wins on a name clash."""
    if not isinstance(source, dict):
        return deepcopy(source if source is not None else target)
    result = deepcopy(target) if isinstance(target, dict) else {}

    for key, entries in source.items():
        current = result.get(key)
        if key in COMPONENT_TYPES and isinstance(entries, dict) and isinstance(current, dict):
            result[key] = {**current, **deepcopy(entries)}
        else:
            result[key] = deepcopy(entries)
    return result


def merge_paths(target: Any, source: Any) -> dict[str, Any]:
    """Merge path items: HTTP methods per path, path parameters by (name, in)."""
    result = deepcopy(target) if isinstance(target, dict) else {}
    if not isinstance(source, dict):
        return result

    for path, item in source.items():
        existing = result.get(path)
        if not isinstance(existing, dict) or not isinstance(item, dict):
            result[path] = deepcopy(item)
            continue

        merged = {**existing, **deepcopy(item)}
        if item.get("parameters"):
            merged["parameters"] = merge_parameters(
                existing.get("parameters") or [], item["parameters"]
            )
        result[path] = merged
    return result


def _parameter_key(param: Any) -> str:
    if isinstance(param, dict) and param.get("name") and param.get("in"):
        return f"{param['name']}:{param['in']}"
    return _canonical(param)


def merge_parameters(target: list, source: list) -> list:
    """Union of two parameter lists keyed by (name, in); source wins."""
    merged: dict[str, Any] = {}
    for param in target:
        merged[_parameter_key(param)] = deepcopy(param)
    for param in source:
        merged[_parameter_key(param)] = deepcopy(param)
    return list(merged.values())


def merge_tags(target: Any, source: Any) -> list[dict[str, Any]]:
    """Merge tag lists by name; fields of a source tag override the target."""
    tags: dict[str, dict[str, Any]] = {}
    for tag in target if isinstance(target, list) else []:
        if isinstance(tag, dict) and tag.get("name"):
            tags[tag["name"]] = deepcopy(tag)

    for tag in source if isinstance(source, list) else []:
        if not isinstance(tag, dict) or not tag.get("name"):
            continue
        existing = tags.get(tag["name"])
        if existing is None:
            tags[tag["name"]] = deepcopy(tag)
            continue
        tags[tag["name"]] = {**existing, **deepcopy(tag)}
    return list(tags.values())


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def merge_arrays(target: list, source: list) -> list:
    """Target items in order, then source items not already present."""
    combined = deepcopy(target)
    seen = {_canonical(item) for item in target}
    for item in source:
        key = _canonical(item)
        if key not in seen:
            combined.append(deepcopy(item))
            seen.add(key)
    return combined
