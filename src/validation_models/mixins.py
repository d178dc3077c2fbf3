"""Combined mixin for plain Python models."""

from validation_models.projection import SerializationMixin
from validation_models.responses import ResponseMixin
from validation_models.validation import ValidationMixin


class ModelValidationMixin(ValidationMixin, SerializationMixin, ResponseMixin):
    """Loading, validation, projection and JSON responses for a model.

    Example::

        class Signup(ModelValidationMixin):
            attribute_names = ("email", "password")

            def scenarios(self):
                return {"register": ["email", "password"]}

            def validate_rules(self):
                return {"email": fields.Email(required=True)}

            def fields(self):
                return ["email"]
    """
