"""Tests for JSON responses and query parameter parsing."""

from __future__ import annotations

from marshmallow import fields
from werkzeug.datastructures import MultiDict

from validation_models import ModelValidationMixin, requested_selectors


class Article(ModelValidationMixin):
    attribute_names = ("id", "title", "body")

    def validate_rules(self):
        return {"title": fields.String(required=True)}

    def fields(self):
        return ["id:int", "title", "body"]

    def extra_fields(self):
        return [{"excerpt": lambda article, _: article.body[:5]}]


def test_requested_selectors_split_and_trim():
    args = MultiDict({"fields": "id, title,,", "expand": "excerpt"})

    assert requested_selectors(args) == (["id", "title"], ["excerpt"])


def test_requested_selectors_missing_or_empty_params():
    assert requested_selectors(MultiDict()) == ([], [])
    assert requested_selectors(MultiDict({"fields": "", "expand": ""})) == ([], [])


def test_requested_selectors_custom_param_names():
    args = MultiDict({"only": "id", "with": "excerpt"})

    assert requested_selectors(args, "only", "with") == (["id"], ["excerpt"])


def test_respond_json_with_errors_returns_422(app):
    article = Article.new_model({"id": "7", "body": "Hello world"})
    article.validate()
    article.add_error("body", "Too short.")

    response, status = article.respond_json(["id"], [])

    assert status == 422
    assert response.get_json() == {
        "message": "Missing data for required field.",
        "fields": {
            "title": ["Missing data for required field."],
            "body": ["Too short."],
        },
    }


def test_respond_json_projects_selected_fields(app):
    article = Article.new_model({"id": "7", "title": "Hi", "body": "Hello world"})

    assert article.validate()
    response, status = article.respond_json(["id", "title"], ["excerpt"])

    assert status == 200
    assert response.get_json() == {"id": 7, "title": "Hi", "excerpt": "Hello"}


def test_respond_json_keeps_declared_field_order(app):
    article = Article.new_model({"id": "7", "title": "Hi", "body": "Hello world"})

    response, _ = article.respond_json()

    assert list(response.get_json()) == ["id", "title", "body"]


def test_respond_no_content():
    assert Article().respond_no_content() == ("", 204)
