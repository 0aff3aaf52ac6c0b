"""Manifest (``package.json``) helpers.

Deep merging of manifest fragments, canonical key ordering and JSON encoding.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import msgspec

from scaffold_forge.values import JSExpression, contains_expression

__all__ = (
    "DEPENDENCY_KEYS",
    "PACKAGE_KEY_ORDER",
    "SCRIPTS_ORDER",
    "ConflictHandler",
    "copy_value",
    "deep_merge",
    "encode_package",
    "is_object",
    "sort_object",
    "sort_package",
)

logger = logging.getLogger("scaffold_forge")

ConflictHandler = Callable[[tuple[str, ...], Any, Any], None]

DEPENDENCY_KEYS = ("dependencies", "devDependencies")
SCRIPTS_ORDER = ("serve", "build", "test:unit", "test:e2e", "lint", "deploy")
PACKAGE_KEY_ORDER = (
    "name",
    "version",
    "private",
    "description",
    "author",
    "scripts",
    "main",
    "module",
    "browser",
    "jsDelivr",
    "unpkg",
    "files",
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "vue",
    "babel",
    "eslintConfig",
    "prettier",
    "postcss",
    "browserslist",
    "jest",
)


def is_object(value: Any) -> bool:
    """Check whether a value is a plain key-value mapping.

    Returns:
        True for mappings, False for sequences, primitives and expressions.
    """
    return isinstance(value, Mapping)


def copy_value(value: Any) -> Any:
    """Copy a manifest value, turning nested mappings into dicts and sequences into lists.

    Returns:
        A copy sharing no containers with ``value``.
    """
    if is_object(value):
        return {key: copy_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [copy_value(item) for item in value]
    return value


def deep_merge(
    existing: "Mapping[str, Any]",
    incoming: "Mapping[str, Any]",
    *,
    on_conflict: "ConflictHandler | None" = None,
    path: "tuple[str, ...]" = (),
) -> dict[str, Any]:
    """Recursively merge ``incoming`` into a copy of ``existing``.

    Nested mappings merge, every other incoming value (arrays included) replaces
    the existing one.

    Args:
        existing: The current value.
        incoming: The fragment to merge in.
        on_conflict: Called with ``(key_path, existing, incoming)`` when a leaf is
            overwritten with a different value.
        path: Key path of ``existing`` inside the manifest.

    Returns:
        The merged mapping. Neither argument is modified.
    """
    merged = dict(existing)
    for key, value in incoming.items():
        key_path = (*path, key)
        current = merged.get(key)
        if is_object(current) and is_object(value):
            merged[key] = deep_merge(current, value, on_conflict=on_conflict, path=key_path)
            continue
        if on_conflict is not None and key in merged and current != value:
            on_conflict(key_path, current, value)
        merged[key] = copy_value(value)
    return merged


def sort_object(
    obj: "Mapping[str, Any] | None",
    key_order: "Iterable[str] | None" = None,
    *,
    sort_remaining: bool = True,
) -> "dict[str, Any] | None":
    """Return a copy of ``obj`` with its keys reordered.

    Keys listed in ``key_order`` come first, in that order. The remaining keys
    follow, sorted alphabetically when ``sort_remaining`` is set and in their
    original relative order otherwise.

    Returns:
        The reordered mapping, or ``None`` when ``obj`` is ``None``.
    """
    if obj is None:
        return None
    result: dict[str, Any] = {}
    for key in key_order or ():
        if key in obj:
            result[key] = obj[key]
    remaining = [key for key in obj if key not in result]
    if sort_remaining:
        remaining.sort()
    for key in remaining:
        result[key] = obj[key]
    return result


def sort_package(pkg: "Mapping[str, Any]") -> dict[str, Any]:
    """Canonicalize the key order of a manifest.

    Dependency maps are sorted alphabetically, scripts follow the usual
    ``serve, build, test, lint, deploy`` order and top-level fields follow
    :data:`PACKAGE_KEY_ORDER`. Unlisted scripts and fields keep their relative
    order after the listed ones. Values are never changed.

    Returns:
        A reordered copy of the manifest.
    """
    pkg = dict(pkg)
    for key in DEPENDENCY_KEYS:
        if is_object(pkg.get(key)):
            pkg[key] = sort_object(pkg[key])
    if is_object(pkg.get("scripts")):
        pkg["scripts"] = sort_object(pkg["scripts"], SCRIPTS_ORDER, sort_remaining=False)
    return sort_object(pkg, PACKAGE_KEY_ORDER, sort_remaining=False) or {}


def _json_safe(value: Any, path: "tuple[str, ...]") -> Any:
    if is_object(value):
        result = {}
        for key, item in value.items():
            if isinstance(item, JSExpression):
                logger.warning("Dropping JavaScript expression at %r from the JSON manifest", ".".join((*path, key)))
                continue
            result[key] = _json_safe(item, (*path, key))
        return result
    if isinstance(value, (list, tuple)):
        items = []
        for index, item in enumerate(value):
            if isinstance(item, JSExpression):
                logger.warning("Replacing JavaScript expression at %r with null", ".".join((*path, str(index))))
                items.append(None)
                continue
            items.append(_json_safe(item, (*path, str(index))))
        return items
    return value


def encode_package(pkg: "Mapping[str, Any]") -> str:
    """Serialize a manifest to pretty-printed JSON.

    ``JSExpression`` leaves have no JSON form: they are dropped from mappings and
    replaced with ``null`` inside arrays.

    Returns:
        Two-space indented JSON with a single trailing newline.
    """
    if contains_expression(pkg):
        pkg = _json_safe(pkg, ())
    content = msgspec.json.format(msgspec.json.encode(pkg), indent=2)
    return content.decode("utf-8") + "\n"
