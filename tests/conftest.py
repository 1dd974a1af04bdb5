
import pytest

from foldertree import create_app
from foldertree.extensions import db
from foldertree.services import folders as folder_service


@pytest.fixture
def app(tmp_path):
    """Application bound to a throwaway SQLite file and blob directory."""
    app = create_app('testing', {
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{tmp_path / "foldertree.db"}',
        'UPLOAD_FOLDER': str(tmp_path / 'blobs'),
        'ALLOWED_MIME_TYPES': (),
        'MAX_FILE_SIZE_MB': 1,
        'MAX_FILES_PER_UPLOAD': 5,
    })
    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def root_id(app):
    with app.app_context():
        return folder_service.get_root_folder().id


@pytest.fixture
def blob_dir(tmp_path):
    return tmp_path / 'blobs'


