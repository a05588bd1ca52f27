"""Generic key/value state container used by the host runtime."""
from __future__ import annotations
import json
import os
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Optional

from ..core.smilecdr.exceptions import ValidationError
from .schema import Field, TYPE_BOOL, TYPE_INT, TYPE_SET, TYPE_STRING


class ResourceData:
    """Attribute values of one resource instance, typed by a schema.

    Unset attributes read as their schema default (or the type's zero
    value). Sets are stored as sorted, de-duplicated lists so that two
    states compare equal regardless of element order.

    Usage:
        d = ResourceData(OPENID_CLIENT_SCHEMA, {"client_id": "app1", "client_name": "App"})
        d.get("enabled")        # True (schema default)
        d.set("pid", 42)
    """

    def __init__(self, schema: Dict[str, Field], raw: Optional[Dict[str, Any]] = None, id: str = ""):
        self.schema = schema
        self._values: Dict[str, Any] = {}
        self._id = id
        for key, value in (raw or {}).items():
            self.set(key, value)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        """Set the resource id; an empty id marks the resource as gone."""
        self._id = value or ""

    def get(self, key: str) -> Any:
        field = self._field(key)
        if key in self._values and self._values[key] is not None:
            return self._values[key]
        return self._default(field)

    def set(self, key: str, value: Any) -> None:
        field = self._field(key)
        self._values[key] = _normalize(field, value, key)

    def to_dict(self) -> Dict[str, Any]:
        """Every attribute with defaults applied."""
        return {key: self.get(key) for key in self.schema}

    def validate(self) -> None:
        """Check required attributes, types and attribute validators.

        Raises:
            ValidationError: On the first violation
        """
        _validate_values(self.schema, self.to_dict(), "")

    def _field(self, key: str) -> Field:
        try:
            return self.schema[key]
        except KeyError:
            raise KeyError(f"Unknown attribute {key!r}") from None

    @staticmethod
    def _default(field: Field) -> Any:
        if field.env:
            env_value = os.environ.get(field.env)
            if env_value:
                return env_value
        if field.default is not None:
            return field.default
        if field.type == TYPE_STRING and not field.required:
            return None
        return field.zero()


def _normalize(field: Field, value: Any, key: str) -> Any:
    if value is None:
        return None
    if not field.is_collection:
        return value
    if isinstance(value, (str, bytes, dict)):
        raise ValidationError(f"expected a {field.type} of values, got {type(value).__name__}", key)
    items = list(value)
    if field.is_nested:
        items = [_element(field.elem, item) for item in items]
    if field.type == TYPE_SET:
        unique = {json.dumps(item, sort_keys=True, default=str): item for item in items}
        items = [unique[k] for k in sorted(unique)]
    return items


def _element(schema: Dict[str, Field], item: Any) -> Dict[str, Any]:
    """Coerce a nested element (dict or dataclass) onto its schema, defaults applied."""
    if is_dataclass(item):
        item = asdict(item)
    if not isinstance(item, dict):
        raise ValidationError(f"expected a mapping, got {type(item).__name__}")
    element = {}
    for name, sub in schema.items():
        value = item.get(name)
        if value is None and sub.default is not None:
            value = sub.default
        element[name] = _normalize(sub, value, name)
    return element


def _check_type(field: Field, value: Any, path: str) -> None:
    if field.type == TYPE_BOOL and not isinstance(value, bool):
        raise ValidationError(f"expected a boolean, got {value!r}", path)
    if field.type == TYPE_INT and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValidationError(f"expected an integer, got {value!r}", path)
    if field.type == TYPE_STRING and not isinstance(value, str):
        raise ValidationError(f"expected a string, got {value!r}", path)


def _validate_values(schema: Dict[str, Field], values: Dict[str, Any], prefix: str) -> None:
    for name, field in schema.items():
        path = f"{prefix}{name}"
        value = values.get(name)
        if field.computed:
            continue
        if field.required and (value is None or value == field.zero()):
            raise ValidationError("is required", path)
        if value is None:
            continue
        if field.is_collection:
            for item in value:
                if field.is_nested:
                    _validate_values(field.elem, item, f"{path}.")
                else:
                    _check_type(Field(field.elem), item, path)
                    if field.validate:
                        field.validate(item, path)
            continue
        _check_type(field, value, path)
        if field.validate:
            field.validate(value, path)
