import logging
import os
from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from config import config
from .extensions import db, migrate
from .exceptions import FolderTreeError, StorageError

logger = logging.getLogger(__name__)


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
        package_logger.addHandler(handler)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(FolderTreeError)
    def handle_folder_tree_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(e):
        db.session.rollback()
        logger.exception('Record store request failed')
        error = StorageError('Could not reach the record store')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({'error': e.description}), e.code


def create_app(config_name: str = None, test_config: dict = None) -> Flask:
    config_name = config_name or os.environ.get('FLASK_CONFIG', 'default')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    if test_config:
        app.config.update(test_config)

    configure_logging(app)
    config[config_name].init_app(app)

    # Initialize database
    db.init_app(app)
    migrate.init_app(app, db)

    from .storage import init_blob_store
    init_blob_store(app)

    with app.app_context():
        # Make sure every model is registered before creating tables
        from . import models  # noqa: F401
        from .services.folders import ensure_root_folder
        db.create_all()
        ensure_root_folder()

    # Register blueprints
    from .routes.folders import folders as folders_blueprint
    from .routes.files import files as files_blueprint, uploads as uploads_blueprint
    from .routes.meta import meta as meta_blueprint

    api_prefix = app.config.get('API_PREFIX') or None
    app.register_blueprint(folders_blueprint, url_prefix=api_prefix)
    app.register_blueprint(files_blueprint, url_prefix=api_prefix)
    app.register_blueprint(uploads_blueprint)
    app.register_blueprint(meta_blueprint)

    from .commands import register_commands
    register_commands(app)

    register_error_handlers(app)

    logger.info('foldertree started, blobs in %s', app.config['UPLOAD_FOLDER'])
    return app
