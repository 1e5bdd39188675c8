"""Conversion between model dataclasses and JSON-safe dictionaries."""

import types
import typing
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert a flat dataclass without deep copy.

    Uses ``dataclasses.fields()`` + ``getattr`` instead of ``asdict()``;
    every model in this package is flat.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def from_dict(cls: type[T], data: dict[str, Any]) -> T:
    """Rebuild a model dataclass from its serialized form.

    Unknown keys are ignored and missing keys fall back to the field
    default, so snapshots written by older versions still load.

    Parameters
    ----------
    cls : type
        Target dataclass.
    data : dict[str, Any]
        Output of :func:`to_dict` (or any compatible mapping).

    Returns
    -------
    T
        Instance of ``cls``.
    """
    hints = typing.get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = deserialize_value(data[f.name], hints[f.name])
    return cls(**kwargs)


def deserialize_value(value: Any, hint: Any) -> Any:
    """Coerce a JSON value back into the annotated Python type."""
    if value is None:
        return None

    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        inner = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        return deserialize_value(value, inner[0]) if len(inner) == 1 else value
    if origin in (dict, list):
        return value

    if hint is Decimal:
        return Decimal(str(value))
    if hint is datetime:
        return value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if hint is date:
        if isinstance(value, datetime):
            return value.date()
        return value if isinstance(value, date) else date.fromisoformat(value)
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint(value)
    if hint is int:
        return int(value)
    if hint is str:
        return str(value)
    return value
