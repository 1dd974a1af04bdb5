"""Exceptions raised by the folder/file store."""


class FolderTreeError(Exception):
    """Base class for errors the API reports to the caller."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.message}


class ValidationError(FolderTreeError):
    """Bad input: blank name, disallowed upload, forbidden operation."""

    status_code = 400


class FileTypeError(ValidationError):
    """Raised when an upload's MIME type is not in the allow-list."""

    def __init__(self, filename: str, mime_type: str) -> None:
        self.filename = filename
        self.mime_type = mime_type
        super().__init__(f'File type not allowed: {filename} ({mime_type})')


class FileTooLargeError(ValidationError):
    """Raised when a single upload exceeds the per-file size limit."""

    def __init__(self, filename: str, size: int, max_size: int) -> None:
        self.filename = filename
        self.size = size
        self.max_size = max_size
        super().__init__(f'File too large: {filename} ({size} bytes, limit {max_size})')


class NotFoundError(FolderTreeError):
    """Unknown folder, file or blob id."""

    status_code = 404

    def __init__(self, kind: str, item_id: str) -> None:
        self.kind = kind
        self.item_id = item_id
        super().__init__(f'{kind} not found: {item_id}')


class StorageError(FolderTreeError):
    """The backing record store could not be reached or refused a write."""

    status_code = 503


class BlobCleanupError(Exception):
    """A physical blob could not be removed.

    Never reaches the caller: the blob store logs it and carries on so
    metadata cleanup is not blocked.
    """

    def __init__(self, storage_key: str, reason: str) -> None:
        self.storage_key = storage_key
        self.reason = reason
        super().__init__(f'Could not delete blob {storage_key}: {reason}')
