"""Run declarative validation rules through marshmallow."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from marshmallow import EXCLUDE, Schema, fields

from validation_models.exceptions import InvalidRuleError

logger = logging.getLogger(__name__)

LABEL_PLACEHOLDER = "{label}"


def _build_field(attribute: str, rule: Any) -> fields.Field:
    if isinstance(rule, fields.Field):
        return copy.deepcopy(rule)
    if isinstance(rule, (list, tuple)) and all(callable(item) for item in rule):
        return fields.Raw(allow_none=True, validate=list(rule))
    raise InvalidRuleError(attribute, rule)


def _override_messages(
    attribute: str,
    field: fields.Field,
    messages: Mapping[str, str],
    label: str,
) -> None:
    overrides = {}
    for key in field.error_messages:
        message = messages.get(f"{attribute}.{key}", messages.get(key))
        if message is not None:
            overrides[key] = message.replace(LABEL_PLACEHOLDER, label)
    if overrides:
        field.error_messages = {**field.error_messages, **overrides}


def validate_with_rules(
    attributes: Mapping[str, Any],
    rules: Mapping[str, Any],
    messages: Optional[Mapping[str, str]] = None,
    labels: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Validate ``attributes`` against ``rules`` and return marshmallow errors.

    Args:
        attributes: Current attribute values of the model.
        rules: Mapping of attribute name to a marshmallow field, or to a list
            of marshmallow validators applied to non-null values.
        messages: Message overrides keyed by ``"attribute.key"`` or ``"key"``,
            where ``key`` is a marshmallow error key such as ``required``.
        labels: Display labels substituted for ``{label}`` in overrides.

    Returns:
        The error dict produced by :meth:`marshmallow.Schema.validate`, empty
        when every rule passes. Attributes without a rule are ignored.
    """

    messages = messages or {}
    labels = labels or {}

    declared = {}
    for attribute, rule in rules.items():
        field = _build_field(attribute, rule)
        _override_messages(attribute, field, messages, labels.get(attribute, attribute))
        declared[attribute] = field

    schema = Schema.from_dict(declared, name="ModelRulesSchema")(unknown=EXCLUDE)
    errors = schema.validate(dict(attributes))
    if errors:
        logger.debug("Rule validation failed for %s", ", ".join(map(str, errors)))
    return errors
