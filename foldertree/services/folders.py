import logging
from datetime import datetime
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from ..extensions import db
from ..models import Folder
from ..exceptions import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

_UNSET = object()
_MAX_NAME_LENGTH = 255


def clean_folder_name(name: str) -> str:
    """Trim a folder name, rejecting blank or over-long values"""
    cleaned = (name or '').strip()
    if not cleaned:
        raise ValidationError('Folder name is required')
    if len(cleaned) > _MAX_NAME_LENGTH:
        raise ValidationError(f'Folder name must be at most {_MAX_NAME_LENGTH} characters')
    return cleaned


def commit_session() -> None:
    """Commit the current session, turning driver failures into StorageError"""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Database commit failed')
        raise StorageError('Could not write to the record store') from e


def get_folder(folder_id: str) -> Folder:
    folder = db.session.get(Folder, folder_id) if folder_id else None
    if folder is None:
        raise NotFoundError('Folder', folder_id)
    return folder


def get_root_folder() -> Folder:
    root = Folder.query.filter_by(is_root=True).first()
    if root is None:
        raise NotFoundError('Folder', 'root')
    return root


def list_folders() -> list[Folder]:
    return Folder.query.order_by(Folder.created_at).all()


def child_ids(folder_id: str) -> list[str]:
    """Ids of the folders whose parent is folder_id"""
    rows = db.session.query(Folder.id).filter(Folder.parent_id == folder_id).all()
    return [row[0] for row in rows]


def ensure_root_folder() -> Folder:
    """
    Create the root folder if it does not exist yet.

    Safe to run from several processes at once: the unique index on
    is_root rejects a second root, and the loser re-reads the winner's row.
    """
    root = Folder.query.filter_by(is_root=True).first()
    if root is not None:
        return root

    root = Folder(name=current_app.config.get('ROOT_FOLDER_NAME', 'root'), is_root=True)
    db.session.add(root)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info('Root folder was created concurrently, reusing it')
        return get_root_folder()

    logger.info('Created root folder %s', root.id)
    return root


def create_folder(name: str, parent_id: str = None, icon: str = None) -> Folder:
    """
    Create a folder under parent_id, or under the root when no parent is given.

    Args:
        name: Display name, trimmed; must not be blank
        parent_id: Id of an existing folder
        icon: Optional display token

    Returns:
        Folder: The new folder
    """
    name = clean_folder_name(name)
    parent = get_folder(parent_id) if parent_id else get_root_folder()

    folder = Folder(name=name, parent_id=parent.id, icon=icon)
    db.session.add(folder)
    commit_session()

    logger.info('Created folder %s "%s" under %s', folder.id, folder.name, parent.id)
    return folder


def rename_folder(folder_id: str, new_name: str, icon=_UNSET) -> Folder:
    """
    Rename a folder and optionally change its icon in the same write.

    A supplied icon is stored even when the new name is rejected.
    """
    folder = get_folder(folder_id)
    try:
        new_name = clean_folder_name(new_name)
    except ValidationError:
        if icon is not _UNSET:
            set_icon(folder_id, icon)
        raise

    folder.name = new_name
    if icon is not _UNSET:
        folder.icon = icon
    folder.updated_at = datetime.utcnow()
    commit_session()
    return folder


def set_icon(folder_id: str, icon: str = None) -> Folder:
    folder = get_folder(folder_id)
    folder.icon = icon
    folder.updated_at = datetime.utcnow()
    commit_session()
    return folder


def detach_from_parent(folder_id: str, commit: bool = True) -> Folder:
    """
    Unlink a folder from its parent.

    Only used by the cascade right before the node is removed; the parent's
    children view no longer lists it from this point on.

    Returns:
        Folder: The former parent, or None if the folder had none
    """
    folder = get_folder(folder_id)
    parent = folder.parent
    if parent is None:
        return None

    folder.parent_id = None
    parent.updated_at = datetime.utcnow()
    if commit:
        commit_session()
    else:
        db.session.flush()
    return parent


def delete_folder(folder_id: str, commit: bool = True) -> None:
    """Remove a single, empty folder node; subtrees go through the cascade"""
    folder = get_folder(folder_id)
    if folder.is_root:
        raise ValidationError('The root folder cannot be deleted')
    if folder.children.first() is not None or folder.files.first() is not None:
        raise ValidationError('Folder is not empty')
    db.session.delete(folder)
    if commit:
        commit_session()


def delete_folders(folder_ids, commit: bool = True) -> int:
    """Remove folder nodes in one statement; the root is never matched"""
    folder_ids = list(folder_ids)
    if not folder_ids:
        return 0
    deleted = Folder.query.filter(
        Folder.id.in_(folder_ids),
        Folder.is_root.is_(None)
    ).delete(synchronize_session=False)
    if commit:
        commit_session()
    return deleted
