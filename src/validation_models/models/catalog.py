"""Catalog models used by the reference application."""

from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy
from marshmallow import fields, validate

from validation_models.orm import OrmModelValidationMixin
from validation_models.validation import validates_attribute

db = SQLAlchemy()


class Category(OrmModelValidationMixin, db.Model):
    __tablename__ = "category"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), unique=True, nullable=False)

    products = db.relationship(
        "Product", back_populates="category", order_by="Product.id"
    )

    def scenarios(self):
        return {"create": ["name"]}

    def validate_rules(self):
        return {
            "name": fields.String(required=True, validate=validate.Length(min=1, max=80)),
        }

    def fields(self):
        return ["id", "name"]

    def extra_fields(self):
        return [
            "products",
            {"product_count:int": lambda category, _: len(category.products)},
        ]


class Product(OrmModelValidationMixin, db.Model):
    __tablename__ = "product"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(120), nullable=False)
    sku = db.Column(db.String(32), unique=True, nullable=False)
    price = db.Column(db.Float, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    category_id = db.Column(db.Integer, db.ForeignKey("category.id"), nullable=True)

    category = db.relationship("Category", back_populates="products")

    def scenarios(self):
        return {
            "create": ["title", "sku", "price", "quantity", "category_id"],
            "update": ["title", "price", "quantity", "category_id"],
        }

    def validate_rules(self):
        rules = {
            "title": fields.String(required=True, validate=validate.Length(min=1, max=120)),
            "price": fields.Float(required=True, validate=validate.Range(min=0)),
            "quantity": fields.Integer(validate=validate.Range(min=0)),
            "category_id": fields.Integer(allow_none=True),
        }
        # The SKU is immutable once created.
        if self.scenario != "update":
            rules["sku"] = fields.String(
                required=True,
                validate=validate.Regexp(
                    r"^[A-Z0-9-]{3,32}$",
                    error="Use 3-32 upper-case letters, digits or dashes.",
                ),
            )
        return rules

    def messages(self):
        return {
            "required": "{label} is required.",
            "price.invalid": "{label} must be a number.",
        }

    def attribute_labels(self):
        return {"title": "Title", "sku": "SKU", "price": "Price", "category_id": "Category"}

    @validates_attribute("sku")
    def validate_sku_is_unique(self, attribute, value, options, scenario):
        if not value:
            return
        query = db.select(Product.id).where(Product.sku == value)
        if self.id is not None:
            query = query.where(Product.id != self.id)
        with db.session.no_autoflush:
            taken = db.session.execute(query).first() is not None
        if taken:
            self.add_error(attribute, f"{self.attribute_label(attribute)} '{value}' is already taken.")

    @validates_attribute("category_id")
    def validate_category_exists(self, attribute, value, options, scenario):
        if value is None:
            return
        try:
            category_id = int(value)
        except (TypeError, ValueError):
            return
        with db.session.no_autoflush:
            category = db.session.get(Category, category_id)
        if category is None:
            self.add_error(attribute, f"{self.attribute_label(attribute)} {category_id} does not exist.")

    def fields(self):
        return [
            "id:int",
            "title",
            "sku",
            "price:float",
            "quantity:int",
            {"in_stock:bool": lambda product, _: product.quantity},
        ]

    def extra_fields(self):
        return [
            "category",
            {"label": lambda product, _: f"{product.title} ({product.sku})"},
        ]
