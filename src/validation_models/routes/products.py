import logging

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from validation_models.models.catalog import Category, Product, db
from validation_models.responses import requested_selectors


products_bp = Blueprint('products', __name__)

logger = logging.getLogger(__name__)


def _selectors():
    """Return the ``fields`` and ``expand`` selectors of the current request."""

    return requested_selectors(
        request.args,
        current_app.config.get('FIELDS_PARAM', 'fields'),
        current_app.config.get('EXPAND_PARAM', 'expand'),
    )


def _invalid_payload():
    if request.is_json and not isinstance(request.get_json(silent=True), dict):
        return jsonify({'message': 'Invalid or missing JSON payload.', 'fields': {}}), 400
    return None


@products_bp.route('/products', methods=['GET'])
def list_products():
    fields, expand = _selectors()
    products = db.session.scalars(db.select(Product).order_by(Product.id)).all()
    return jsonify([product.to_dict(fields, expand) for product in products])


@products_bp.route('/products', methods=['POST'])
def create_product():
    invalid = _invalid_payload()
    if invalid is not None:
        return invalid

    product = Product.new_model(request, scenario='create')
    try:
        product.save()
    except IntegrityError as err:
        return _handle_integrity_error(err)

    return product.respond_json(*_selectors())


@products_bp.route('/products/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = db.get_or_404(Product, product_id)
    return product.respond_json(*_selectors())


@products_bp.route('/products/<int:product_id>', methods=['PUT'])
def update_product(product_id):
    product = db.get_or_404(Product, product_id)
    invalid = _invalid_payload()
    if invalid is not None:
        return invalid

    product.scenario = 'update'
    product.load(request)
    try:
        product.save()
    except IntegrityError as err:
        return _handle_integrity_error(err)

    return product.respond_json(*_selectors())


@products_bp.route('/products/<int:product_id>', methods=['DELETE'])
def delete_product(product_id):
    product = db.get_or_404(Product, product_id)
    db.session.delete(product)
    db.session.commit()
    logger.info('Deleted product %s', product_id)
    return product.respond_no_content()


@products_bp.route('/categories', methods=['POST'])
def create_category():
    invalid = _invalid_payload()
    if invalid is not None:
        return invalid

    category = Category.new_model(request, scenario='create')
    try:
        category.save()
    except IntegrityError as err:
        return _handle_integrity_error(err)

    return category.respond_json(*_selectors())


@products_bp.route('/categories/<int:category_id>', methods=['GET'])
def get_category(category_id):
    category = db.get_or_404(Category, category_id)
    return category.respond_json(*_selectors())


def _handle_integrity_error(error: IntegrityError):
    message = str(getattr(error, 'orig', error)).lower()
    errors = {}
    if 'sku' in message:
        errors['sku'] = ['SKU already exists.']
    if 'name' in message:
        errors.setdefault('name', []).append('Name already exists.')
    if not errors:
        errors['_schema'] = ['Unique constraint violated.']
    first = next(iter(errors.values()))[0]
    return jsonify({'message': first, 'fields': errors}), 409
