import os
import platform
from pathlib import Path
from flask import Flask
from dotenv import load_dotenv

load_dotenv()


def get_base_storage_path() -> Path:
    """Get the base storage path, honouring BASE_STORAGE_PATH when set"""
    override = os.environ.get('BASE_STORAGE_PATH')
    if override:
        return Path(override)

    system = platform.system().lower()
    if system == 'linux':
        if os.path.exists('/var/lib/foldertree'):
            return Path('/var/lib/foldertree')
        return Path.home() / 'foldertree'
    elif system in ('darwin', 'windows'):
        return Path.home() / 'foldertree'
    else:
        return Path(__file__).parent / 'storage'


def get_storage_path() -> str:
    """Get the blob storage directory"""
    explicit = os.environ.get('STORAGE_DIR')
    if explicit:
        return explicit
    return str(get_base_storage_path() / 'uploads')


def get_db_path(env: str) -> str:
    """Get the SQLite database path for the given environment"""
    if env == 'development':
        return str(Path(__file__).parent / 'dev.db')
    return str(get_base_storage_path() / 'foldertree.db')


def parse_mime_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated MIME allow-list; empty means allow everything"""
    if not raw:
        return ()
    return tuple(item.strip().lower() for item in raw.split(',') if item.strip())


class Config(object):
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # JSON API, forms are never rendered
    WTF_CSRF_ENABLED = False

    UPLOAD_FOLDER = get_storage_path()
    MAX_FILE_SIZE_MB = int(os.environ.get('MAX_FILE_SIZE_MB', 20))
    MAX_FILES_PER_UPLOAD = int(os.environ.get('MAX_FILES_PER_UPLOAD', 5))
    ALLOWED_MIME_TYPES = parse_mime_list(os.environ.get('ALLOWED_MIME_TYPES'))
    # Whole multipart body; per-file limits are checked during ingestion
    MAX_CONTENT_LENGTH = (MAX_FILE_SIZE_MB * MAX_FILES_PER_UPLOAD + 1) * 1024 * 1024

    API_PREFIX = os.environ.get('API_PREFIX', '/api')
    ROOT_FOLDER_NAME = os.environ.get('ROOT_FOLDER_NAME', 'root')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    SERVER_PORT = int(os.environ.get('SERVER_PORT', os.environ.get('PORT', 4000)))
    SERVER_HOST = os.environ.get('SERVER_HOST', '0.0.0.0')

    @staticmethod
    def init_app(app: Flask) -> None:
        """Ensure the storage directories exist"""
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

        db_uri = app.config.get('SQLALCHEMY_DATABASE_URI') or ''
        if db_uri.startswith('sqlite:///'):
            db_dir = os.path.dirname(db_uri[len('sqlite:///'):])
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DEV_DATABASE_URL') or f'sqlite:///{get_db_path("development")}'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f'sqlite:///{get_db_path("production")}'


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    ALLOWED_MIME_TYPES = ()


# Environment configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': ProductionConfig
}
