"""Ingestion of uploaded file streams into a folder."""

import logging
import mimetypes
import os
from dataclasses import dataclass, field

from flask import current_app
from werkzeug.datastructures import FileStorage

from ..exceptions import (
    FileTooLargeError,
    FileTypeError,
    FolderTreeError,
    NotFoundError,
    ValidationError,
)
from ..models import File
from ..storage import get_blob_store
from . import files as file_service
from . import folders as folder_service
from .cascade import tree_lock

logger = logging.getLogger(__name__)


@dataclass
class RejectedUpload:
    name: str
    reason: str

    def to_dict(self) -> dict:
        return {'name': self.name, 'reason': self.reason}


@dataclass
class UploadResult:
    files: list[File] = field(default_factory=list)
    rejected: list[RejectedUpload] = field(default_factory=list)

    @property
    def uploaded(self) -> int:
        return len(self.files)


def detect_mime_type(upload: FileStorage) -> str:
    """Declared content type of the part, falling back to the file extension"""
    declared = (upload.mimetype or '').lower()
    if declared and declared != 'application/octet-stream':
        return declared
    guessed, _ = mimetypes.guess_type(upload.filename or '')
    return guessed or declared or 'application/octet-stream'


def is_allowed_mime_type(mime_type: str, allowed: tuple[str, ...]) -> bool:
    """An empty allow-list accepts everything; 'image/*' style entries match a whole family"""
    if not allowed:
        return True
    for entry in allowed:
        if entry.endswith('/*'):
            if mime_type.startswith(entry[:-1]):
                return True
        elif mime_type == entry:
            return True
    return False


def get_upload_size(upload: FileStorage) -> int:
    upload.stream.seek(0, os.SEEK_END)
    size = upload.stream.tell()
    upload.stream.seek(0)
    return size


def ingest_upload(folder_id: str, upload: FileStorage) -> File:
    """
    Validate one stream, store its bytes and link a File record to the folder.

    Raises:
        FileTypeError: MIME type outside the configured allow-list
        FileTooLargeError: Stream larger than MAX_FILE_SIZE_MB
        NotFoundError: The folder disappeared before the record was written
    """
    filename = os.path.basename(upload.filename or '')
    if not filename:
        raise ValidationError('File name is required')

    mime_type = detect_mime_type(upload)
    if not is_allowed_mime_type(mime_type, current_app.config.get('ALLOWED_MIME_TYPES', ())):
        raise FileTypeError(filename, mime_type)

    size = get_upload_size(upload)
    max_size = current_app.config['MAX_FILE_SIZE_MB'] * 1024 * 1024
    if size > max_size:
        raise FileTooLargeError(filename, size, max_size)

    blob_store = get_blob_store()
    storage_key = blob_store.put(upload.stream, filename)

    try:
        with tree_lock:
            # A cascade may have removed the folder while the bytes were written
            folder_service.get_folder(folder_id)
            return file_service.create_file(
                name=filename,
                size=size,
                mime_type=mime_type,
                storage_key=storage_key,
                folder_id=folder_id
            )
    except Exception:
        logger.warning('Rolling back blob %s for %s', storage_key, filename)
        blob_store.delete(storage_key)
        raise


def ingest_uploads(folder_id: str, uploads: list[FileStorage]) -> UploadResult:
    """
    Ingest a batch of uploads into one folder.

    Every file succeeds or fails on its own; a rejected file does not stop
    the rest of the batch.

    Args:
        folder_id: Target folder id
        uploads: Incoming file parts

    Returns:
        UploadResult: Created records and the rejected names with reasons
    """
    max_count = current_app.config['MAX_FILES_PER_UPLOAD']
    if len(uploads) > max_count:
        raise ValidationError(f'Too many files: at most {max_count} per upload')

    folder_service.get_folder(folder_id)

    result = UploadResult()
    for position, upload in enumerate(uploads):
        name = upload.filename or ''
        try:
            result.files.append(ingest_upload(folder_id, upload))
        except NotFoundError as e:
            # The folder is gone, nothing else in the batch can land
            result.rejected.extend(
                RejectedUpload(remaining.filename or '', e.message)
                for remaining in uploads[position:]
            )
            break
        except FolderTreeError as e:
            logger.info('Rejected upload %s: %s', name, e.message)
            result.rejected.append(RejectedUpload(name, e.message))

    logger.info(
        'Upload into folder %s: %d stored, %d rejected',
        folder_id,
        result.uploaded,
        len(result.rejected),
    )
    return result
