"""Tests for the SQLAlchemy model mixin using the catalog models."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from validation_models.models.catalog import Category, Product, db


def _product_payload(**overrides):
    payload = {"title": "Desk lamp", "sku": "LAMP-1", "price": 19.5, "quantity": 3}
    payload.update(overrides)
    return payload


@pytest.mark.usefixtures("db_session")
class TestAttributeAccess:
    def test_attribute_names_come_from_the_mapped_columns(self):
        assert Product().attribute_names == (
            "id",
            "title",
            "sku",
            "price",
            "quantity",
            "category_id",
        )

    def test_load_only_writes_columns(self):
        product = Product()
        product.load({"title": "Lamp", "category": "not a column", "unknown": 1})

        assert product.get_model_attributes() == {"title": "Lamp"}
        assert product.category is None

    def test_scenario_limits_loaded_columns(self):
        product = Product.new_model(_product_payload(id=99), scenario="create")

        assert "id" not in product.get_model_attributes()
        assert product.sku == "LAMP-1"

    def test_persistent_instances_report_every_column(self):
        product = Product.new_model(_product_payload(), scenario="create")
        assert product.save()

        assert product.get_model_attributes() == {
            "id": product.id,
            "title": "Desk lamp",
            "sku": "LAMP-1",
            "price": 19.5,
            "quantity": 3,
            "category_id": None,
        }


@pytest.mark.usefixtures("db_session")
class TestSave:
    def test_save_validates_and_persists(self):
        product = Product.new_model(_product_payload(), scenario="create")

        assert product.save() is True
        assert product.id is not None
        assert db.session.get(Product, product.id).title == "Desk lamp"

    def test_invalid_model_is_not_persisted(self):
        product = Product.new_model(_product_payload(title=None, price="abc"), scenario="create")

        assert product.save() is False
        assert product.get_error_messages() == {
            "title": ["Field may not be null."],
            "price": ["Price must be a number."],
        }
        assert db.session.scalars(db.select(Product)).all() == []

    def test_labelled_required_messages(self):
        product = Product.new_model({"quantity": 1}, scenario="create")

        assert product.save() is False
        assert product.get_first_error("title") == "Title is required."
        assert product.get_first_error("sku") == "SKU is required."

    def test_validation_can_be_skipped(self):
        product = Product.new_model(_product_payload(price=-5), scenario="create")

        assert product.save({"validate": False}) is True
        assert product.price == -5

    def test_before_save_can_cancel(self):
        product = Product.new_model(_product_payload(), scenario="create")
        product.before_save = lambda options: False

        assert product.save() is False
        assert not product.has_errors()
        assert db.session.scalars(db.select(Product)).all() == []

    def test_after_save_receives_options(self):
        seen = []
        product = Product.new_model(_product_payload(), scenario="create")
        product.after_save = seen.append

        assert product.save({"validate": True, "source": "test"})
        assert seen == [{"validate": True, "source": "test"}]

    def test_database_errors_roll_back_and_propagate(self):
        assert Category.new_model({"name": "Lighting"}).save()

        duplicate = Category.new_model({"name": "Lighting"})
        with pytest.raises(IntegrityError):
            duplicate.save()

        assert [category.name for category in db.session.scalars(db.select(Category))] == [
            "Lighting"
        ]


@pytest.mark.usefixtures("db_session")
class TestInlineValidators:
    def test_sku_must_be_unique(self):
        assert Product.new_model(_product_payload(), scenario="create").save()

        duplicate = Product.new_model(_product_payload(title="Other"), scenario="create")

        assert duplicate.validate() is False
        assert duplicate.get_error_messages() == {"sku": ["SKU 'LAMP-1' is already taken."]}

    def test_existing_product_does_not_conflict_with_itself(self):
        product = Product.new_model(_product_payload(), scenario="create")
        assert product.save()

        product.scenario = None
        assert product.validate() is True

    def test_category_must_exist(self):
        product = Product.new_model(_product_payload(category_id=404), scenario="create")

        assert product.validate() is False
        assert product.get_error_messages() == {"category_id": ["Category 404 does not exist."]}

    def test_update_scenario_keeps_sku(self):
        product = Product.new_model(_product_payload(), scenario="create")
        assert product.save()

        product.scenario = "update"
        product.load({"sku": "NEW-1", "price": 25})

        assert product.save() is True
        assert product.sku == "LAMP-1"
        assert product.price == 25


@pytest.mark.usefixtures("db_session")
class TestSerialization:
    def _create(self):
        category = Category.new_model({"name": "Lighting"})
        assert category.save()
        product = Product.new_model(
            _product_payload(category_id=category.id), scenario="create"
        )
        assert product.save()
        return category, product

    def test_default_projection(self):
        _, product = self._create()

        assert product.to_dict() == {
            "id": product.id,
            "title": "Desk lamp",
            "sku": "LAMP-1",
            "price": 19.5,
            "quantity": 3,
            "in_stock": True,
        }

    def test_nested_relation_selector(self):
        category, product = self._create()

        assert product.to_dict(["title", "category.name"], ["category"]) == {
            "title": "Desk lamp",
            "category": {"name": "Lighting"},
        }

    def test_expanding_a_collection(self):
        category, product = self._create()

        data = category.to_dict(["name", "products.sku"], ["products", "product_count"])

        assert data == {
            "name": "Lighting",
            "products": [{"sku": "LAMP-1"}],
            "product_count": 1,
        }
