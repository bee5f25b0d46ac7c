# app/routes/__init__.py
from flask import Blueprint

# Create blueprints
assets_bp = Blueprint('assets', __name__, url_prefix='/admin/api/assets')
categories_bp = Blueprint('categories', __name__, url_prefix='/admin/api/categories')
assignments_bp = Blueprint('assignments', __name__, url_prefix='/admin/api/assignments')
my_assignments_bp = Blueprint('my_assignments', __name__, url_prefix='/api/assignments')
users_bp = Blueprint('users', __name__, url_prefix='/admin/api/users')

# Import views after blueprints are created
from . import assets, categories, assignments, users  # noqa: E402,F401
