"""Exceptions raised for invalid model declarations."""


class ValidationModelsError(Exception):
    """Base class for errors raised by the model mixins."""


class UnknownCastError(ValidationModelsError, ValueError):
    """Raised when a field declaration names an unsupported cast."""

    def __init__(self, field: str, cast: str):
        self.field = field
        self.cast = cast
        super().__init__(f"Unknown cast '{cast}' for field '{field}'.")


class InvalidRuleError(ValidationModelsError, TypeError):
    """Raised when a validation rule is neither a field nor a list of validators."""

    def __init__(self, attribute: str, rule):
        self.attribute = attribute
        self.rule = rule
        super().__init__(
            f"Rule for '{attribute}' must be a marshmallow field or a list of "
            f"validators, got {type(rule).__name__}."
        )
