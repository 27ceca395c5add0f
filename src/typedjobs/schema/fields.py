"""Field-level rules applied to every argument schema, whatever its config.

``JobArgs`` gets these behaviours from its model config, but a job may
declare a plain ``pydantic.BaseModel`` (or nest one inside ``JobArgs``).
The pipeline therefore enforces them itself, walking the schema's field
annotations:

- :func:`unknown_keys` lists keys no field accepts.  Submission rejects them.
- :func:`stringify_numbers` turns numbers bound for ``str`` fields into their
  decimal text.  Dispatch applies it before lax validation.

Both descend into nested models through ``Optional``, unions with a single
non-None member, lists, tuples, sets and dict values.  Models configured with
``extra="allow"`` accept any key.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import UnionType
from typing import Any, Union, get_args, get_origin

from pydantic import AliasChoices, BaseModel
from pydantic.fields import FieldInfo

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)
_MAPPING_ORIGINS = (dict, Mapping)


def field_keys(model: type[BaseModel]) -> dict[str, FieldInfo]:
    """Every input key ``model`` accepts.

    String aliases always count.  A field name counts when the field has no
    alias, or when the model validates by name as well.
    """
    config = model.model_config
    by_name = bool(config.get("populate_by_name") or config.get("validate_by_name"))

    keys: dict[str, FieldInfo] = {}
    for name, info in model.model_fields.items():
        if by_name or (info.alias is None and info.validation_alias is None):
            keys[name] = info
        for alias in _string_aliases(info):
            keys[alias] = info
    return keys


def _string_aliases(info: FieldInfo) -> list[str]:
    aliases = [info.alias] if info.alias else []
    validation = info.validation_alias
    if isinstance(validation, str):
        aliases.append(validation)
    elif isinstance(validation, AliasChoices):
        aliases.extend(choice for choice in validation.choices if isinstance(choice, str))
    return aliases


def _unwrap(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return members[0] if len(members) == 1 else None
    return annotation


def _model_of(annotation: Any) -> type[BaseModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _walk(annotation: Any, value: Any, on_model: Callable, on_leaf: Callable) -> Any:
    annotation = _unwrap(annotation)
    if annotation is None:
        return value

    model = _model_of(annotation)
    if model is not None:
        return on_model(model, value) if isinstance(value, Mapping) else value

    origin, args = get_origin(annotation), get_args(annotation)
    if origin in _SEQUENCE_ORIGINS and isinstance(value, list):
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            return value
        item = args[0] if args else Any
        return [_walk(item, element, on_model, on_leaf) for element in value]
    if origin in _MAPPING_ORIGINS and len(args) == 2 and isinstance(value, Mapping):
        return {key: _walk(args[1], element, on_model, on_leaf) for key, element in value.items()}
    return on_leaf(annotation, value)


def _keep(annotation: Any, value: Any) -> Any:
    return value


# =============================================================================
# UNKNOWN KEYS
# =============================================================================


def unknown_keys(model: type[BaseModel], data: Mapping[str, Any], prefix: str = "") -> list[str]:
    """Dotted paths of keys in ``data`` that ``model`` has no field for."""
    keys = field_keys(model)
    allow_extra = model.model_config.get("extra") == "allow"
    found: list[str] = []

    for key, value in data.items():
        path = f"{prefix}{key}"
        info = keys.get(key)
        if info is None:
            if not allow_extra:
                found.append(path)
            continue

        def visit(nested: type[BaseModel], nested_data: Mapping[str, Any], _path: str = path) -> Any:
            found.extend(unknown_keys(nested, nested_data, f"{_path}."))
            return nested_data

        _walk(info.annotation, value, visit, _keep)

    return found


# =============================================================================
# NUMBER TO STRING
# =============================================================================


def stringify_numbers(model: type[BaseModel], data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``data`` with numbers for ``str`` fields replaced by their decimal text."""
    keys = field_keys(model)
    result: dict[str, Any] = {}
    for key, value in data.items():
        info = keys.get(key)
        result[key] = value if info is None else _walk(info.annotation, value, stringify_numbers, _number_to_str)
    return result


def _number_to_str(annotation: Any, value: Any) -> Any:
    if annotation is str and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value
