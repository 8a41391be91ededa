"""
Serialization Utilities.

Provides consistent serialization/deserialization patterns for pack
records. Pack documents use camelCase keys on the wire and omit unset
(None) fields, so exported files stay compatible with the dashboard.
"""

from typing import Any, Dict, Type, TypeVar, Union, get_args, get_origin, get_type_hints
from dataclasses import fields, is_dataclass
from enum import Enum
import json


T = TypeVar('T')


def to_camel(name: str) -> str:
    """Convert a snake_case field name to its camelCase wire key."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def serialize_value(value: Any) -> Any:
    """
    Convert a value into its JSON-ready wire form.

    Handles:
    - Enum -> value
    - SerializableMixin dataclass -> camelCase dict
    - list/tuple -> recursively serialized list
    - dict -> recursively serialized dict (keys untouched)

    Args:
        value: Record, enum, container or scalar

    Returns:
        Plain dict/list/scalar value
    """
    if value is None:
        return None

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, SerializableMixin):
        return value.to_dict()

    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]

    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}

    return value


def deserialize_value(value: Any, target_type: Type = None) -> Any:
    """
    Deserialize a value from JSON/dict using a type hint.

    Values that do not have the expected container shape are returned
    unchanged; structural checks belong to the pack validator.

    Args:
        value: Value to deserialize
        target_type: Optional type hint for conversion

    Returns:
        Deserialized value
    """
    if value is None or target_type is None:
        return value

    origin = get_origin(target_type)

    # Optional[X] / Union[X, None]
    if origin is Union:
        candidates = [a for a in get_args(target_type) if a is not type(None)]
        return deserialize_value(value, candidates[0]) if candidates else value

    if origin is list:
        args = get_args(target_type)
        if not isinstance(value, list) or not args:
            return value
        return [deserialize_value(v, args[0]) for v in value]

    if origin is dict:
        args = get_args(target_type)
        if not isinstance(value, dict) or len(args) < 2:
            return value
        return {k: deserialize_value(v, args[1]) for k, v in value.items()}

    if isinstance(target_type, type):
        if issubclass(target_type, SerializableMixin) and isinstance(value, dict):
            return target_type.from_dict(value)
        if issubclass(target_type, Enum) and not isinstance(value, target_type):
            try:
                return target_type(value)
            except ValueError:
                return value

    return value


class SerializableMixin:
    """
    Dataclass mixin for camelCase pack documents.

    Field names map to camelCase keys; None fields are left out of the
    output and missing keys fall back to the field defaults.

    Example:
        @dataclass
        class FunnelStep(SerializableMixin):
            id: str = ""
            semantic_type: str = ""

        FunnelStep(id="a", semantic_type="user_id").to_dict()
        # {"id": "a", "semanticType": "user_id"}
    """

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, None fields omitted."""
        if not is_dataclass(self):
            raise TypeError(f"{type(self).__name__} is not a dataclass")

        result = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            result[to_camel(field.name)] = serialize_value(value)

        return result

    def to_json(self, indent: int = None) -> str:
        """Serialize the wire form to JSON."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Build from a wire dict; unknown keys are ignored."""
        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} is not a dataclass")

        hints = get_type_hints(cls)

        kwargs = {}
        for field in fields(cls):
            key = to_camel(field.name)
            if key in data:
                kwargs[field.name] = deserialize_value(data[key], hints.get(field.name))

        return cls(**kwargs)

    @classmethod
    def from_json(cls: Type[T], json_str: str) -> T:
        """Parse a JSON document into a record."""
        return cls.from_dict(json.loads(json_str))


def compact_json(data: Any) -> str:
    """Serialize without whitespace; the form checksums are computed over."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
