"""Mapping scrape results onto application record types."""

import dataclasses
import types
import typing
from typing import Any, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .rules import RuleSet
from .values import Value

T = TypeVar('T')


def zero_value(annotation: Any) -> Any:
    """Empty value for a field annotation, used when a key is missing."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        if type(None) in typing.get_args(annotation):
            return None
        return zero_value(typing.get_args(annotation)[0])

    target = origin or annotation
    if target in (list, tuple, set, frozenset):
        return target()
    if target is dict:
        return {}
    if target is str:
        return ""
    if target in (int, float, bool):
        return target()
    return None


_MISSING = object()


def _coerce(annotation: Any, value: Value) -> Any:
    """Validate one value against a field annotation, or ``_MISSING`` if it does not fit."""
    if value is None:
        return _MISSING
    if annotation is None:
        return value
    try:
        return TypeAdapter(annotation).validate_python(value)
    except ValidationError:
        return _MISSING


def _dataclass_from_value(record_type: Type[T], data: Dict[str, Value]) -> T:
    hints = typing.get_type_hints(record_type)
    kwargs = {}
    for f in dataclasses.fields(record_type):
        if not f.init:
            continue
        value = _coerce(hints.get(f.name), data.get(f.name))
        if value is not _MISSING:
            kwargs[f.name] = value
        elif f.default is not dataclasses.MISSING:
            kwargs[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            kwargs[f.name] = f.default_factory()
        else:
            kwargs[f.name] = zero_value(hints.get(f.name))
    return record_type(**kwargs)


def _model_from_value(record_type: Type[BaseModel], data: Dict[str, Value]) -> BaseModel:
    values = {}
    for name, field_info in record_type.model_fields.items():
        key = field_info.alias or name
        value = _coerce(field_info.annotation, data.get(key))
        if value is not _MISSING:
            values[key] = value
        elif field_info.is_required():
            values[key] = zero_value(field_info.annotation)
    return record_type.model_validate(values)


def convert_result(value: Dict[str, Value], record_type: Type[T]) -> T:
    """
    Convert a top-level result into ``record_type``.

    Missing, null or mistyped values fall back to the field default, or to
    an empty value for the field's type, instead of failing.

    Args:
        value: Result of evaluating a rule set
        record_type: A dataclass, a pydantic model, or any class defining
            a ``from_scrape_result`` classmethod

    Returns:
        The populated record
    """
    custom = getattr(record_type, "from_scrape_result", None)
    if custom is not None:
        return custom(value)

    data = value if isinstance(value, dict) else {}

    if dataclasses.is_dataclass(record_type):
        return _dataclass_from_value(record_type, data)
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        return _model_from_value(record_type, data)

    raise TypeError(
        f"Cannot convert scrape results into {record_type!r}; use a dataclass, "
        "a pydantic model, or define from_scrape_result()"
    )


def rules_for(record_type: Any) -> Optional[RuleSet]:
    """Built-in rule set declared by a record type via ``scrape_rules()``."""
    factory = getattr(record_type, "scrape_rules", None)
    if factory is None:
        return None

    rules = factory()
    if isinstance(rules, RuleSet):
        return rules
    return RuleSet(rules=tuple(rules))
