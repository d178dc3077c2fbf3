"""Shared pytest fixtures for the test suite."""

from __future__ import annotations

from typing import Iterator

import pytest
from flask import Flask
from sqlalchemy.orm import Session

from validation_models.config import Config
from validation_models.main import create_app
from validation_models.models.catalog import db


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"


@pytest.fixture(scope="session")
def app() -> Iterator[Flask]:
    """Provide a configured Flask application for the test session."""
    app = create_app(TestingConfig)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    """Return a Flask test client for HTTP endpoint validation."""
    return app.test_client()


@pytest.fixture()
def db_session(app) -> Iterator[Session]:
    """Provide a clean database session for each test case."""
    with app.app_context():
        yield db.session
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.remove()
