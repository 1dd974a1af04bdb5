import io

from foldertree.commands import find_orphaned_blobs, init_db_command, sweep_blobs_command
from foldertree.services import files as file_service
from foldertree.services import folders as folder_service
from foldertree.storage import get_blob_store


def seed_blobs(app):
    """One referenced blob and one orphan; returns their keys."""
    with app.app_context():
        store = get_blob_store()
        folder = folder_service.create_folder('Kept')
        kept_key = store.put(io.BytesIO(b'kept'), 'kept.txt')
        file_service.create_file('kept.txt', 4, 'text/plain', kept_key, folder.id)
        orphan_key = store.put(io.BytesIO(b'orphan'), 'orphan.txt')
        return kept_key, orphan_key


def test_find_orphaned_blobs(app):
    kept_key, orphan_key = seed_blobs(app)

    with app.app_context():
        assert find_orphaned_blobs() == [orphan_key]


def test_sweep_dry_run_deletes_nothing(app):
    kept_key, orphan_key = seed_blobs(app)

    result = app.test_cli_runner().invoke(sweep_blobs_command, ['--dry-run'])

    assert result.exit_code == 0
    assert f'Would delete: {orphan_key}' in result.output
    with app.app_context():
        assert get_blob_store().exists(orphan_key)


def test_sweep_removes_only_orphans(app):
    kept_key, orphan_key = seed_blobs(app)

    result = app.test_cli_runner().invoke(sweep_blobs_command)

    assert result.exit_code == 0
    assert 'Removed 1 of 1 orphaned blobs' in result.output
    with app.app_context():
        store = get_blob_store()
        assert store.exists(kept_key)
        assert not store.exists(orphan_key)


def test_init_db_reuses_existing_root(app):
    with app.app_context():
        root_id = folder_service.get_root_folder().id

    result = app.test_cli_runner().invoke(init_db_command)

    assert result.exit_code == 0
    assert root_id in result.output
