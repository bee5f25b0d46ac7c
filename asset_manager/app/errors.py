"""Error taxonomy shared by the query builder, the services and the routes."""
import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class AssetManagementError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidArgument(AssetManagementError):
    """A required filter or field is missing or malformed."""
    status_code = 400


class NotFound(AssetManagementError):
    """A referenced asset, assignment, category or user does not exist."""
    status_code = 404


class Conflict(AssetManagementError):
    """Composite-key collision, or an operation blocked by existing references."""
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(AssetManagementError)
    def handle_asset_management_error(error):
        logger.warning('%s: %s', type(error).__name__, error.message)
        return jsonify({'error': error.message}), error.status_code
