import logging
from ..extensions import db
from ..models import File
from ..exceptions import NotFoundError
from ..storage import get_blob_store
from .folders import commit_session

logger = logging.getLogger(__name__)


def create_file(name: str, size: int, mime_type: str, storage_key: str, folder_id: str,
                commit: bool = True) -> File:
    """Create the metadata record for a blob that is already stored"""
    file = File(
        name=name,
        size=size,
        mime_type=mime_type,
        storage_key=storage_key,
        folder_id=folder_id
    )
    db.session.add(file)
    if commit:
        commit_session()
    return file


def get_file(file_id: str) -> File:
    file = db.session.get(File, file_id) if file_id else None
    if file is None:
        raise NotFoundError('File', file_id)
    return file


def list_files(folder_id: str) -> list[File]:
    """Files located directly in a folder; an unknown folder simply has none"""
    return File.query.filter_by(folder_id=folder_id).order_by(File.created_at).all()


def list_files_in(folder_ids) -> list[File]:
    folder_ids = list(folder_ids)
    if not folder_ids:
        return []
    return File.query.filter(File.folder_id.in_(folder_ids)).all()


def delete_file(file_id: str) -> None:
    """Delete one file: its blob best-effort, then its record"""
    file = get_file(file_id)
    storage_key = file.storage_key

    get_blob_store().delete(storage_key)
    db.session.delete(file)
    commit_session()

    logger.info('Deleted file %s (%s)', file_id, storage_key)


def delete_files(file_ids, commit: bool = True) -> int:
    """Remove file records in one statement; blobs are the caller's concern"""
    file_ids = list(file_ids)
    if not file_ids:
        return 0
    deleted = File.query.filter(File.id.in_(file_ids)).delete(synchronize_session=False)
    if commit:
        commit_session()
    return deleted
