from flask import jsonify, request

from asset_manager.app.routes import users_bp as bp
from asset_manager.app.services import users as user_service
from asset_manager.app.validators import require_object


@bp.route('', methods=['POST'])
def create_user():
    user = user_service.create_user(require_object(request.get_json(silent=True)))
    return jsonify(user.to_dict()), 201


@bp.route('/<staff_code>/disable', methods=['PUT'])
def disable_user(staff_code):
    user = user_service.disable_user(staff_code)
    return jsonify(user.to_dict())
