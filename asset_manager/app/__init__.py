import logging
import sqlite3

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_mail import Mail
from sqlalchemy import event
from sqlalchemy.engine import Engine

from asset_manager.config import Config

db = SQLAlchemy()
mail = Mail()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, 'connect')
def register_sqlite_functions(dbapi_connection, connection_record):
    # SQLite's built-in lower() only folds ASCII; asset and user names are often accented.
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function('lower', 1, _unicode_lower, deterministic=True)


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    mail.init_app(app)

    from asset_manager.app.errors import register_error_handlers
    register_error_handlers(app)

    with app.app_context():
        @app.route('/health')
        def health():
            return jsonify({'status': 'ok'})

        # Import blueprints inside context
        from asset_manager.app.routes import (assets_bp, categories_bp, assignments_bp,
                                              my_assignments_bp, users_bp)

        # Register blueprints
        app.register_blueprint(assets_bp)
        app.register_blueprint(categories_bp)
        app.register_blueprint(assignments_bp)
        app.register_blueprint(my_assignments_bp)
        app.register_blueprint(users_bp)

        # Create all database tables
        from asset_manager.app import models  # noqa: F401
        db.create_all()

    logging.getLogger(__name__).info('Asset manager started with %s', app.config['SQLALCHEMY_DATABASE_URI'])
    return app
