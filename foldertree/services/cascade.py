"""Cascading removal of a folder subtree together with its files and blobs."""

import logging
import threading

from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import StorageError, ValidationError
from ..extensions import db
from ..storage import get_blob_store
from . import files as file_service
from . import folders as folder_service

logger = logging.getLogger(__name__)

# Held for a whole cascade and for each upload's record creation, so a
# file is never linked to a folder a cascade has already removed.
tree_lock = threading.RLock()


def collect_subtree_ids(folder_id: str) -> set[str]:
    """Return folder_id plus the ids of all its descendants.

    Walks the tree with an explicit stack, so depth is bounded by memory
    rather than by the interpreter's recursion limit. The visited set also
    stops the walk on a corrupted, cyclic parent chain.
    """
    subtree_ids = set()
    stack = [folder_id]

    while stack:
        current_id = stack.pop()
        if current_id in subtree_ids:
            continue
        subtree_ids.add(current_id)

        for child_id in folder_service.child_ids(current_id):
            if child_id not in subtree_ids:
                stack.append(child_id)

    return subtree_ids


def delete_folder_tree(folder_id: str) -> int:
    """Delete a folder, every descendant folder, and every file inside them.

    File records and blobs for the whole subtree go before any folder node,
    and all record changes are committed in one transaction, so no file
    ever outlives its folder. Blob deletion is best-effort: a missing or
    undeletable blob is logged and does not stop the cascade.

    Args:
        folder_id: Id of the folder to remove.

    Returns:
        Number of folders removed (the target included).

    Raises:
        NotFoundError: If the folder does not exist.
        ValidationError: If the folder is the root.
        StorageError: If the record store rejects the changes.
    """
    with tree_lock:
        try:
            target = folder_service.get_folder(folder_id)
            if target.is_root:
                raise ValidationError('The root folder cannot be deleted')

            subtree_ids = collect_subtree_ids(target.id)

            doomed_files = file_service.list_files_in(subtree_ids)
            blob_store = get_blob_store()
            for file in doomed_files:
                blob_store.delete(file.storage_key)

            file_service.delete_files([file.id for file in doomed_files], commit=False)

            if target.parent_id is not None:
                folder_service.detach_from_parent(target.id, commit=False)

            folder_service.delete_folders(subtree_ids, commit=False)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Cascade delete of folder %s failed', folder_id)
            raise StorageError(f'Could not delete folder {folder_id}') from e

        folder_service.commit_session()

    logger.info(
        'Deleted folder %s: %d folders, %d files',
        folder_id,
        len(subtree_ids),
        len(doomed_files),
    )
    return len(subtree_ids)
