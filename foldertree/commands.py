import logging
import click
from flask import Flask
from flask.cli import with_appcontext
from .extensions import db
from .models import File
from .services.folders import ensure_root_folder
from .storage import get_blob_store

logger = logging.getLogger(__name__)


def find_orphaned_blobs() -> list[str]:
    """Storage keys present on disk that no File record references"""
    referenced = {row[0] for row in db.session.query(File.storage_key).all()}
    return sorted(key for key in get_blob_store().iter_keys() if key not in referenced)


def sweep_orphaned_blobs(dry_run: bool = False) -> tuple[int, int]:
    """
    Delete blobs left behind by interrupted cascades or uploads.

    Returns:
        tuple: (orphans found, orphans removed)
    """
    orphans = find_orphaned_blobs()
    if dry_run:
        return len(orphans), 0

    blob_store = get_blob_store()
    removed = sum(1 for key in orphans if blob_store.delete(key))
    logger.info('Blob sweep removed %d of %d orphaned blobs', removed, len(orphans))
    return len(orphans), removed


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the tables and the root folder."""
    db.create_all()
    root = ensure_root_folder()
    click.echo(f'Database initialized, root folder {root.id}')


@click.command('sweep-blobs')
@click.option('--dry-run', is_flag=True, help='List orphaned blobs without deleting them.')
@with_appcontext
def sweep_blobs_command(dry_run):
    """Delete blobs that no file record points at."""
    if dry_run:
        for key in find_orphaned_blobs():
            click.echo(f'Would delete: {key}')
    found, removed = sweep_orphaned_blobs(dry_run=dry_run)
    if dry_run:
        click.echo(f'Would remove {found} orphaned blobs')
    else:
        click.echo(f'Removed {removed} of {found} orphaned blobs')


def register_commands(app: Flask) -> None:
    app.cli.add_command(init_db_command)
    app.cli.add_command(sweep_blobs_command)
