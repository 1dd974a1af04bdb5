from flask import Blueprint, jsonify, request, send_from_directory, url_for
from ..models import File
from ..services import files as file_service, uploads as upload_service
from ..storage import get_blob_store

files = Blueprint('files', __name__)
uploads = Blueprint('uploads', __name__)


def file_to_dict(file: File) -> dict:
    """Serialize a file record with the URL its blob is served from"""
    url = url_for('uploads.serve_blob', storage_key=file.storage_key, _external=True)
    return file.to_dict(url=url)


@files.route('/files/<folder_id>', methods=['GET'])
def list_files(folder_id: str):
    return jsonify([file_to_dict(file) for file in file_service.list_files(folder_id)])


@files.route('/files/<file_id>', methods=['DELETE'])
def delete_file(file_id: str):
    file_service.delete_file(file_id)
    return jsonify({'ok': True})


@files.route('/upload/<folder_id>', methods=['POST'])
def upload_files(folder_id: str):
    """Store up to MAX_FILES_PER_UPLOAD parts sent under the 'files' field"""
    incoming = [part for part in request.files.getlist('files') if part.filename]
    if not incoming:
        return jsonify({'error': 'No files selected for upload', 'uploaded': 0, 'files': [], 'rejected': []}), 400

    result = upload_service.ingest_uploads(folder_id, incoming)
    body = {
        'uploaded': result.uploaded,
        'files': [file_to_dict(file) for file in result.files],
        'rejected': [rejected.to_dict() for rejected in result.rejected]
    }

    if result.uploaded == 0:
        body['error'] = result.rejected[0].reason if result.rejected else 'No files were uploaded'
        return jsonify(body), 400
    return jsonify(body)


@uploads.route('/uploads/<storage_key>', methods=['GET'])
def serve_blob(storage_key: str):
    blob_store = get_blob_store()
    # resolve() rejects keys that would leave the storage directory
    blob_store.resolve(storage_key)
    return send_from_directory(blob_store.root, storage_key)
