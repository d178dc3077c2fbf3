"""Field selection and projection of models into plain dicts.

Models declare the fields they expose by default in ``fields()`` and the
opt-in fields in ``extra_fields()``. A declaration is one of:

* ``"title"``: the ``title`` attribute.
* ``"id:int"``: the ``id`` attribute cast to ``int``.
* ``{"name": "title"}``: field ``name`` reading attribute ``title``.
* ``{"total:float": lambda model, field: ...}``: a computed field.

Requests select fields with dotted paths, ``category.name`` keeps only
``name`` in the projection of the ``category`` relation.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from validation_models.attributes import AttributeAccessMixin
from validation_models.exceptions import UnknownCastError


_NUMERIC_PREFIX = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def _numeric_prefix(value: str) -> Optional[str]:
    """Return the leading number of ``value``, e.g. ``"12"`` for ``"12abc"``."""

    match = _NUMERIC_PREFIX.match(value)
    return match.group(1) if match else None


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        value = _numeric_prefix(value)
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_float(value: Any) -> float:
    if isinstance(value, str):
        value = _numeric_prefix(value)
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_string(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


CASTS: Dict[str, Callable[[Any], Any]] = {
    "int": _to_int,
    "string": _to_string,
    "float": _to_float,
    "bool": _to_bool,
}


@dataclass(frozen=True)
class FieldDescriptor(ABC):
    """A projected field; subclasses decide where the raw value comes from."""

    name: str
    cast: Optional[str] = None

    def __post_init__(self):
        if self.cast is not None and self.cast not in CASTS:
            raise UnknownCastError(self.name, self.cast)

    @abstractmethod
    def raw_value(self, model: Any) -> Any:
        """Return the value of this field on ``model`` before casting."""

    def resolve(self, model: Any) -> Any:
        value = self.raw_value(model)
        if self.cast is not None:
            value = CASTS[self.cast](value)
        return value


@dataclass(frozen=True)
class AttributeField(FieldDescriptor):
    attribute: str = ""

    def raw_value(self, model: Any) -> Any:
        return model.get_attribute(self.attribute or self.name)


@dataclass(frozen=True)
class ComputedField(FieldDescriptor):
    compute: Optional[Callable[[Any, str], Any]] = None

    def raw_value(self, model: Any) -> Any:
        return self.compute(model, self.name)


def _split_cast(key: str):
    name, sep, cast = key.partition(":")
    return name, (cast if sep else None)


def parse_field(key: str, definition: Any = None) -> FieldDescriptor:
    """Build a descriptor from a declaration key and optional definition."""

    name, cast = _split_cast(key)
    if definition is None:
        return AttributeField(name=name, cast=cast, attribute=name)
    if callable(definition):
        return ComputedField(name=name, cast=cast, compute=definition)
    return AttributeField(name=name, cast=cast, attribute=str(definition))


def parse_fields(declarations: Any) -> List[FieldDescriptor]:
    """Normalize ``fields()`` / ``extra_fields()`` output into descriptors."""

    if isinstance(declarations, Mapping):
        declarations = [declarations]

    descriptors: List[FieldDescriptor] = []
    for item in declarations or ():
        if isinstance(item, FieldDescriptor):
            descriptors.append(item)
        elif isinstance(item, Mapping):
            descriptors.extend(parse_field(key, value) for key, value in item.items())
        else:
            descriptors.append(parse_field(str(item)))
    return descriptors


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def extract_root_fields(fields: Sequence[str]) -> List[str]:
    """Return the unique root names of dotted paths; ``*`` means no restriction."""

    roots = _unique(field.split(".", 1)[0] for field in fields)
    if "*" in roots:
        return []
    return roots


def extract_fields_for(fields: Sequence[str], root_field: str) -> List[str]:
    """Return the nested paths under ``root_field`` with the prefix removed."""

    prefix = f"{root_field}."
    return _unique(field[len(prefix):] for field in fields if field.startswith(prefix))


class SerializationMixin(AttributeAccessMixin):
    """Declarative field lists and request-driven projection."""

    def fields(self) -> Any:
        return []

    def extra_fields(self) -> Any:
        return []

    def resolve_fields(
        self,
        fields: Sequence[str] = (),
        expand: Sequence[str] = (),
    ) -> Dict[str, FieldDescriptor]:
        """Return the descriptors selected by ``fields`` and ``expand``, in order.

        Default fields are restricted by the root names in ``fields`` (all of
        them when it is empty). Extra fields appear only when their name is a
        root of ``expand``.
        """

        field_roots = extract_root_fields(fields)
        expand_roots = extract_root_fields(expand)

        result: Dict[str, FieldDescriptor] = {}
        for descriptor in parse_fields(self.fields()):
            if not field_roots or descriptor.name in field_roots:
                result[descriptor.name] = descriptor

        if not expand_roots:
            return result

        for descriptor in parse_fields(self.extra_fields()):
            if descriptor.name in expand_roots:
                result[descriptor.name] = descriptor
        return result

    def to_dict(
        self,
        fields: Sequence[str] = (),
        expand: Sequence[str] = (),
        recursive: bool = True,
    ) -> Dict[str, Any]:
        """Project the model into a dict.

        Nested serializable models (and lists of them) are projected with the
        sub-paths of ``fields`` and ``expand`` when ``recursive`` is true. A
        model that declares no fields returns all of its attributes.
        """

        data: Dict[str, Any] = {}
        for name, descriptor in self.resolve_fields(fields, expand).items():
            value = descriptor.resolve(self)
            if recursive:
                value = _project(
                    value,
                    extract_fields_for(fields, name),
                    extract_fields_for(expand, name),
                )
            data[name] = value

        if not data:
            return self.get_model_attributes()
        return data


def _project(value: Any, fields: Sequence[str], expand: Sequence[str]) -> Any:
    if isinstance(value, SerializationMixin):
        return value.to_dict(fields, expand)
    if isinstance(value, (list, tuple)):
        return [
            item.to_dict(fields, expand) if isinstance(item, SerializationMixin) else item
            for item in value
        ]
    return value
