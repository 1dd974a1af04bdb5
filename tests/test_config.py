import importlib
import sys
from pathlib import Path


def reload_config(monkeypatch, system_name: str = 'Linux'):
    """Reload config module with a mocked platform.system value."""
    monkeypatch.setattr('platform.system', lambda: system_name)
    sys.modules.pop('config', None)
    return importlib.import_module('config')


def test_base_storage_path_uses_env_override(monkeypatch, tmp_path):
    override_path = tmp_path / 'custom-storage'
    monkeypatch.setenv('BASE_STORAGE_PATH', str(override_path))
    monkeypatch.delenv('STORAGE_DIR', raising=False)
    config = reload_config(monkeypatch)

    assert config.get_base_storage_path() == override_path
    assert config.Config.UPLOAD_FOLDER == str(override_path / 'uploads')


def test_linux_storage_prefers_var_lib(monkeypatch):
    monkeypatch.delenv('BASE_STORAGE_PATH', raising=False)
    config = reload_config(monkeypatch, 'Linux')

    monkeypatch.setattr(config.os.path, 'exists', lambda p: p == '/var/lib/foldertree')

    assert config.get_base_storage_path() == Path('/var/lib/foldertree')


def test_darwin_storage_lives_in_home(monkeypatch):
    monkeypatch.delenv('BASE_STORAGE_PATH', raising=False)
    config = reload_config(monkeypatch, 'Darwin')

    monkeypatch.setattr(config.Path, 'home', lambda: Path('/Users/test-user'))

    assert config.get_base_storage_path() == Path('/Users/test-user/foldertree')


def test_storage_dir_env_wins(monkeypatch, tmp_path):
    monkeypatch.setenv('STORAGE_DIR', str(tmp_path / 'blobs'))
    config = reload_config(monkeypatch)

    assert config.Config.UPLOAD_FOLDER == str(tmp_path / 'blobs')


def test_upload_limits_from_env(monkeypatch):
    monkeypatch.setenv('MAX_FILE_SIZE_MB', '8')
    monkeypatch.setenv('MAX_FILES_PER_UPLOAD', '3')
    config = reload_config(monkeypatch)

    assert config.Config.MAX_FILE_SIZE_MB == 8
    assert config.Config.MAX_FILES_PER_UPLOAD == 3
    assert config.Config.MAX_CONTENT_LENGTH == 25 * 1024 * 1024


def test_upload_limit_defaults(monkeypatch):
    monkeypatch.delenv('MAX_FILE_SIZE_MB', raising=False)
    monkeypatch.delenv('MAX_FILES_PER_UPLOAD', raising=False)
    config = reload_config(monkeypatch)

    assert config.Config.MAX_FILE_SIZE_MB == 20
    assert config.Config.MAX_FILES_PER_UPLOAD == 5


def test_mime_allow_list_parsing(monkeypatch):
    monkeypatch.setenv('ALLOWED_MIME_TYPES', ' image/png, Image/JPEG ,,application/pdf ')
    config = reload_config(monkeypatch)

    assert config.Config.ALLOWED_MIME_TYPES == ('image/png', 'image/jpeg', 'application/pdf')
    assert config.parse_mime_list('') == ()


def test_database_url_from_env(monkeypatch):
    monkeypatch.setenv('DATABASE_URL', 'postgresql://store/foldertree')
    config = reload_config(monkeypatch)

    assert config.ProductionConfig.SQLALCHEMY_DATABASE_URI == 'postgresql://store/foldertree'
