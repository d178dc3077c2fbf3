"""Scenario-aware loading, validation and field selection for Flask models."""

from __future__ import annotations

from typing import Any

from .errors import ErrorBag
from .exceptions import InvalidRuleError, UnknownCastError, ValidationModelsError
from .mixins import ModelValidationMixin
from .projection import AttributeField, ComputedField, FieldDescriptor
from .responses import requested_selectors
from .validation import validates_attribute

__all__ = [
    "AttributeField",
    "ComputedField",
    "ErrorBag",
    "FieldDescriptor",
    "InvalidRuleError",
    "ModelValidationMixin",
    "OrmModelValidationMixin",
    "UnknownCastError",
    "ValidationModelsError",
    "create_app",
    "requested_selectors",
    "validates_attribute",
]


def __getattr__(name: str) -> Any:
    """Lazily expose submodules that pull in SQLAlchemy or the demo app."""

    if name == "OrmModelValidationMixin":
        from .orm import OrmModelValidationMixin as mixin

        return mixin
    if name == "create_app":
        from .main import create_app as factory

        return factory
    raise AttributeError(name)
