"""Mixins for SQLAlchemy (Flask-SQLAlchemy) models."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from flask import current_app
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, object_session

from validation_models.attributes import AttributeAccessMixin
from validation_models.mixins import ModelValidationMixin

logger = logging.getLogger(__name__)


class OrmAttributeAccessMixin(AttributeAccessMixin):
    """Attribute access backed by the SQLAlchemy mapper.

    Only column attributes can be bulk loaded. Relationships and other
    attributes remain readable through :meth:`get_attribute`.
    """

    @property
    def attribute_names(self) -> Tuple[str, ...]:
        return tuple(attr.key for attr in inspect(type(self)).column_attrs)

    def get_model_attributes(self) -> Dict[str, Any]:
        """Return the column values of this instance.

        Persistent instances report every column, reloading expired ones.
        Transient and pending instances report only the columns set on them.
        """

        state = inspect(self)
        names = [attr.key for attr in state.mapper.column_attrs]
        if state.persistent:
            return {name: getattr(self, name) for name in names}
        return {name: state.dict[name] for name in names if name in state.dict}


class OrmModelValidationMixin(OrmAttributeAccessMixin, ModelValidationMixin):
    """Model mixin whose :meth:`save` validates before persisting.

    Mix it in ahead of the declarative base::

        class Product(OrmModelValidationMixin, db.Model):
            ...
    """

    def get_session(self) -> Session:
        session = object_session(self)
        if session is not None:
            return session
        return current_app.extensions["sqlalchemy"].session

    def before_save(self, options: Dict[str, Any]) -> bool:
        """Return ``False`` to cancel the save."""

        return True

    def after_save(self, options: Dict[str, Any]) -> None:
        pass

    def save(self, options: Optional[Dict[str, Any]] = None) -> bool:
        """Validate and persist the model.

        Pass ``{"validate": False}`` to skip validation. Returns ``False`` when
        ``before_save`` cancels or validation fails. Database errors roll the
        session back and propagate.
        """

        options = dict(options or {})

        if not self.before_save(options):
            logger.debug("Save of %s cancelled by before_save", type(self).__name__)
            return False

        if options.get("validate", True) and not self.validate():
            return False

        session = self.get_session()
        session.add(self)
        try:
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.error("Failed to save %s", type(self).__name__, exc_info=True)
            raise

        self.after_save(options)
        return True
