"""Attribute access shared by the validation and serialization mixins."""

from __future__ import annotations

from typing import Any, Dict, Tuple


class AttributeAccessMixin:
    """Attribute access for plain Python models.

    Subclasses list the attributes that can be bulk loaded in
    ``attribute_names``. SQLAlchemy models use
    :class:`validation_models.orm.OrmAttributeAccessMixin` instead, which
    derives the names from the mapper.
    """

    attribute_names: Tuple[str, ...] = ()

    def has_attribute(self, name: str) -> bool:
        return name in self.attribute_names

    def get_attribute(self, name: str) -> Any:
        return getattr(self, name, None)

    def set_attribute(self, name: str, value: Any) -> None:
        setattr(self, name, value)

    def get_model_attributes(self) -> Dict[str, Any]:
        """Return the declared attributes that currently hold a value."""

        return {
            name: getattr(self, name)
            for name in self.attribute_names
            if hasattr(self, name)
        }
