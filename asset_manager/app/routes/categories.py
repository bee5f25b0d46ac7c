from flask import jsonify, request

from asset_manager.app.models import Category
from asset_manager.app.routes import categories_bp as bp
from asset_manager.app.services import assets as asset_service
from asset_manager.app.validators import require_object


def _category_dict(category):
    return {'id': category.id, 'name': category.name, 'prefix': category.prefix}


@bp.route('')
def list_categories():
    categories = Category.query.order_by(Category.name).all()
    return jsonify([_category_dict(c) for c in categories])


@bp.route('', methods=['POST'])
def create_category():
    category = asset_service.create_category(require_object(request.get_json(silent=True)))
    return jsonify(_category_dict(category)), 201
