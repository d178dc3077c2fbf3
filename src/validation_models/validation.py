"""Scenario-aware loading and validation for model objects."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from werkzeug.wrappers import Request

from validation_models.attributes import AttributeAccessMixin
from validation_models.errors import ErrorBag
from validation_models.exceptions import ValidationModelsError
from validation_models.rules import validate_with_rules

logger = logging.getLogger(__name__)


def validates_attribute(*attributes: str) -> Callable:
    """Register a method as an inline validator for ``attributes``.

    The method is called during :meth:`ValidationMixin.validate` as
    ``method(attribute, value, options, scenario)`` for each listed attribute
    the model currently holds, and reports problems with ``add_error``.
    """

    def decorator(func: Callable) -> Callable:
        func.__validated_attributes__ = attributes
        return func

    return decorator


def _request_data(source: Any) -> Any:
    if isinstance(source, Request):
        payload = source.get_json(silent=True)
        if payload is None:
            payload = source.form.to_dict()
        return payload
    return source


class ValidationMixin(AttributeAccessMixin):
    """Scenarios, bulk loading, rule and inline validation, error collection."""

    _inline_validators: Dict[str, Tuple[str, ...]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        tagged: Dict[str, Optional[Tuple[str, ...]]] = {}
        for klass in reversed(cls.__mro__):
            for name, member in vars(klass).items():
                if name in tagged or callable(member):
                    tagged[name] = getattr(member, "__validated_attributes__", None)

        registry: Dict[str, List[str]] = {}
        for name, attributes in tagged.items():
            for attribute in attributes or ():
                registry.setdefault(attribute, []).append(name)
        cls._inline_validators = {
            attribute: tuple(names) for attribute, names in registry.items()
        }

    # -- construction and loading -------------------------------------------

    @classmethod
    def new_model(cls, data: Any, scenario: Optional[str] = None):
        """Create a model in ``scenario`` and load it from ``data``."""

        model = cls()
        model.scenario = scenario
        model.load(data)
        return model

    @classmethod
    def new_multiple_models(cls, data: Any, scenario: Optional[str] = None) -> list:
        """Create one model per entry of ``data``, all in the same scenario.

        ``data`` is a sequence of mappings, a mapping whose values are
        mappings, or a request whose JSON body is one of those.
        """

        items = _request_data(data)
        if isinstance(items, Mapping):
            items = items.values()

        models = []
        for index, item in enumerate(items or ()):
            if not isinstance(item, Mapping):
                raise ValidationModelsError(
                    f"Batch entry {index} for {cls.__name__} must be a mapping, "
                    f"got {type(item).__name__}."
                )
            models.append(cls.new_model(item, scenario))
        return models

    @property
    def scenario(self) -> Optional[str]:
        return self.__dict__.get("_scenario")

    @scenario.setter
    def scenario(self, value: Optional[str]) -> None:
        self.__dict__["_scenario"] = value

    def scenarios(self) -> Dict[str, Sequence[str]]:
        """Return scenario names mapped to the attributes active in them.

        With no scenario set every attribute is active.
        """

        return {}

    def load(self, data: Any) -> None:
        """Copy the entries of ``data`` allowed by the current scenario onto the model."""

        data = _request_data(data) or {}
        scenario = self.scenario
        active = None
        if scenario is not None:
            active = set(self.scenarios().get(scenario, ()))

        for key, value in data.items():
            if active is not None and key not in active:
                logger.debug(
                    "Dropping '%s' on %s: not active in scenario '%s'",
                    key,
                    type(self).__name__,
                    scenario,
                )
                continue
            if not self.has_attribute(key):
                logger.debug("Ignoring unknown attribute '%s' on %s", key, type(self).__name__)
                continue
            self.set_attribute(key, value)

    # -- validation ----------------------------------------------------------

    def validate_rules(self) -> Dict[str, Any]:
        """Return marshmallow rules keyed by attribute name."""

        return {}

    def messages(self) -> Dict[str, str]:
        """Return custom messages keyed by ``"attribute.key"`` or ``"key"``."""

        return {}

    def attribute_labels(self) -> Dict[str, str]:
        return {}

    def attribute_label(self, attribute: str) -> str:
        return self.attribute_labels().get(attribute, attribute)

    def before_validate(self) -> bool:
        """Return ``False`` to stop validation; the model is then invalid."""

        return True

    def after_validate(self) -> None:
        pass

    def validate(self, options: Optional[Dict[str, Any]] = None) -> bool:
        """Run declared rules and inline validators.

        Errors accumulate in :attr:`errors`; they are not reset between calls.
        Returns ``True`` when the model has no errors afterwards.
        """

        options = options if options is not None else {}

        if not self.before_validate():
            logger.debug("Validation of %s halted by before_validate", type(self).__name__)
            return False

        rules = self.validate_rules()
        if rules:
            errors = validate_with_rules(
                self.get_model_attributes(),
                rules,
                self.messages(),
                self.attribute_labels(),
            )
            self.errors.merge(errors)

        for attribute, value in self.get_model_attributes().items():
            for name in self._inline_validators.get(attribute, ()):
                getattr(self, name)(attribute, value, options, self.scenario)

        self.after_validate()

        if self.has_errors():
            logger.debug(
                "%s failed validation on %s",
                type(self).__name__,
                ", ".join(self.errors.keys()),
            )
            return False
        return True

    # -- errors --------------------------------------------------------------

    @property
    def errors(self) -> ErrorBag:
        bag = self.__dict__.get("_errors")
        if bag is None:
            bag = self.__dict__["_errors"] = ErrorBag()
        return bag

    def add_error(self, key: str, message: str) -> None:
        self.errors.add(key, message)

    def has_errors(self) -> bool:
        return not self.errors.is_empty()

    def get_error_messages(self) -> Dict[str, List[str]]:
        return self.errors.messages()

    def get_first_error(self, key: Optional[str] = None) -> str:
        return self.errors.first(key)

    def clear_errors(self, key: Optional[str] = None) -> None:
        self.errors.clear(key)
