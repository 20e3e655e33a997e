"""Registry of configuration sections parsed from one JSON or YAML document.

Each section is created by a registered creator, usually returning a
dataclass instance with defaults.  A field's key in the document is its name,
or the ``"json"`` / ``"yaml"`` entry of the field's metadata.
"""

from __future__ import annotations

import dataclasses
import json
import typing
from collections.abc import Mapping
from typing import Any, Callable

import yaml

from relaykit.errors import ProxyError

_SUFFIX = "_CONFIG"

_creators: dict[str, Callable[[], Any]] = {}


def register_config_creator(name: str, creator: Callable[[], Any]) -> None:
    """Register ``creator`` to build the default config for section ``name``."""
    _creators[name + _SUFFIX] = creator


def _field_hint(field: dataclasses.Field) -> Any:
    hint = field.type
    if isinstance(hint, str):
        return {"str": str, "int": int, "float": float, "bool": bool}.get(hint)
    return hint


def _populate(target: Any, data: Any, fmt: str) -> Any:
    if data is None:
        return target
    if not isinstance(data, Mapping):
        raise ProxyError(
            f"cannot decode {type(data).__name__} into {type(target).__name__}"
        )
    if isinstance(target, dict):
        target.update(data)
        return target
    if dataclasses.is_dataclass(target) and not isinstance(target, type):
        for field in dataclasses.fields(target):
            key = field.metadata.get(fmt, field.name)
            if key not in data:
                continue
            current = getattr(target, field.name)
            value = _convert(data[key], _field_hint(field), current, fmt)
            setattr(target, field.name, value)
        return target
    for key, value in data.items():
        if hasattr(target, key):
            setattr(target, key, value)
    return target


def _convert(value: Any, hint: Any, current: Any, fmt: str) -> Any:
    if dataclasses.is_dataclass(current) and not isinstance(current, type):
        return _populate(current, value, fmt)
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return _populate(hint(), value, fmt)
    if typing.get_origin(hint) is list and isinstance(value, list):
        args = typing.get_args(hint)
        item_hint = args[0] if args else Any
        return [_convert(item, item_hint, None, fmt) for item in value]
    wants_str = hint is str or (hint is None and isinstance(current, str))
    if wants_str and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _build(document: Any, fmt: str) -> dict[str, Any]:
    return {
        name: _populate(creator(), document, fmt)
        for name, creator in _creators.items()
    }


def _merge(ctx: Mapping[str, Any] | None, values: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(ctx or {})
    merged.update(values)
    return merged


def with_json_config(ctx: Mapping[str, Any] | None, data: bytes | str) -> dict[str, Any]:
    """Return a new context holding every section parsed from JSON ``data``."""
    try:
        document = json.loads(data)
    except ValueError as exc:
        raise ProxyError("invalid JSON config").base(exc) from exc
    return _merge(ctx, _build(document, "json"))


def with_yaml_config(ctx: Mapping[str, Any] | None, data: bytes | str) -> dict[str, Any]:
    """Return a new context holding every section parsed from YAML ``data``."""
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ProxyError("invalid YAML config").base(exc) from exc
    return _merge(ctx, _build(document, "yaml"))


def with_config(ctx: Mapping[str, Any] | None, name: str, cfg: Any) -> dict[str, Any]:
    """Return a new context with ``cfg`` stored as section ``name``."""
    return _merge(ctx, {name + _SUFFIX: cfg})


def from_context(ctx: Mapping[str, Any] | None, name: str) -> Any:
    """Return section ``name`` from ``ctx``, or None if it is absent."""
    return (ctx or {}).get(name + _SUFFIX)