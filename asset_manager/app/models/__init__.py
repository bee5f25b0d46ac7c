# app/models/__init__.py
from asset_manager.app import db

# Import models after db
from .states import AssetState, AssignmentState, TERMINAL_ASSIGNMENT_STATE, OPEN_ASSIGNMENT_STATES
from .user import User, UserRole
from .category import Category
from .asset import Asset
from .assignment import Assignment

__all__ = ['db', 'AssetState', 'AssignmentState', 'TERMINAL_ASSIGNMENT_STATE', 'OPEN_ASSIGNMENT_STATES',
    'User', 'UserRole', 'Category', 'Asset', 'Assignment']
