"""Local-directory blob storage for uploaded file bytes."""

import logging
import os
import time
import uuid
from typing import BinaryIO, Iterator

from werkzeug.security import safe_join
from werkzeug.utils import secure_filename

from ..exceptions import BlobCleanupError, NotFoundError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_PARTIAL_SUFFIX = '.part'


class LocalBlobStore:
    """Blob storage backed by a single directory.

    Blobs are addressed by generated storage keys that never derive from
    user input beyond a sanitized extension, so two uploads of the same
    name cannot overwrite each other and keys cannot traverse out of the
    root.
    """

    def __init__(self, root: str) -> None:
        self.root = os.path.abspath(root)
        os.makedirs(self.root, exist_ok=True)

    @staticmethod
    def generate_key(original_name: str) -> str:
        """Build a collision-free storage key keeping the original extension.

        Example: 'Report Q1.PDF' -> '1729339200123-3f2a...c9.pdf'
        """
        extension = os.path.splitext(secure_filename(original_name or ''))[1].lower()
        return f'{int(time.time() * 1000)}-{uuid.uuid4().hex}{extension}'

    def resolve(self, storage_key: str) -> str:
        """Absolute path of a blob; raises NotFoundError for keys outside the root."""
        path = safe_join(self.root, storage_key) if storage_key else None
        if path is None or os.path.dirname(path) != self.root or storage_key.startswith('.'):
            raise NotFoundError('Blob', storage_key)
        return path

    def exists(self, storage_key: str) -> bool:
        try:
            return os.path.isfile(self.resolve(storage_key))
        except NotFoundError:
            return False

    def put(self, stream: BinaryIO, original_name: str) -> str:
        """Write a stream to a new blob and return its storage key.

        Bytes go to a partial file first and are renamed into place, so a
        reader never sees a half-written blob.
        """
        storage_key = self.generate_key(original_name)
        final_path = self.resolve(storage_key)
        partial_path = final_path + _PARTIAL_SUFFIX

        try:
            with open(partial_path, 'wb') as f:
                while True:
                    chunk = stream.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
            os.replace(partial_path, final_path)
        except OSError:
            logger.exception('Failed to write blob %s for %s', storage_key, original_name)
            self._remove_quietly(partial_path)
            raise

        logger.debug('Stored blob %s (%s)', storage_key, original_name)
        return storage_key

    def remove(self, storage_key: str) -> bool:
        """Delete a blob, raising BlobCleanupError when the OS refuses.

        Returns False if the blob was already gone.
        """
        try:
            path = self.resolve(storage_key)
        except NotFoundError as e:
            raise BlobCleanupError(storage_key, 'invalid storage key') from e

        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise BlobCleanupError(storage_key, str(e)) from e
        return True

    def delete(self, storage_key: str) -> bool:
        """Best-effort, idempotent delete; failures are logged, never raised."""
        try:
            removed = self.remove(storage_key)
        except BlobCleanupError as e:
            logger.warning('%s', e)
            return False

        if removed:
            logger.debug('Deleted blob %s', storage_key)
        else:
            logger.debug('Blob already absent: %s', storage_key)
        return removed

    def iter_keys(self) -> Iterator[str]:
        """Yield the storage keys of all complete blobs."""
        with os.scandir(self.root) as entries:
            for entry in entries:
                if entry.is_file() and not entry.name.endswith(_PARTIAL_SUFFIX):
                    yield entry.name

    @staticmethod
    def _remove_quietly(path: str) -> None:
        try:
            os.remove(path)
        except OSError:
            pass
