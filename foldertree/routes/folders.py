from flask import Blueprint, jsonify, request
from ..forms import CreateFolderForm, UpdateFolderForm, first_error, was_submitted
from ..exceptions import ValidationError
from ..services import cascade, folders as folder_service

folders = Blueprint('folders', __name__)


def _check_json_body():
    """Reject JSON bodies the forms cannot read: non-objects and non-string values"""
    if not request.is_json:
        return
    payload = request.get_json(silent=True)
    if payload is None:
        return
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    for key, value in payload.items():
        if value is not None and not isinstance(value, str):
            raise ValidationError(f'{key}: must be a string')


def _validated(form):
    if not form.validate_on_submit():
        raise ValidationError(first_error(form))
    return form


@folders.route('/folders', methods=['GET'])
def list_folders():
    return jsonify([folder.to_dict() for folder in folder_service.list_folders()])


@folders.route('/folders/<folder_id>', methods=['GET'])
def get_folder(folder_id: str):
    folder = folder_service.get_folder(folder_id)
    return jsonify(folder.to_dict(include_contents=True))


@folders.route('/folders', methods=['POST'])
def create_folder():
    _check_json_body()
    form = _validated(CreateFolderForm())
    folder = folder_service.create_folder(
        name=form.name.data,
        parent_id=form.parentId.data or None,
        icon=form.icon.data or None
    )
    return jsonify(folder.to_dict()), 201


@folders.route('/folders/<folder_id>', methods=['PUT'])
def update_folder(folder_id: str):
    _check_json_body()
    form = UpdateFolderForm()

    if not form.validate_on_submit():
        # The icon does not depend on the name being valid
        if was_submitted(form.icon) and not form.icon.errors:
            folder_service.set_icon(folder_id, form.icon.data or None)
        raise ValidationError(first_error(form))

    if was_submitted(form.name):
        if was_submitted(form.icon):
            folder = folder_service.rename_folder(folder_id, form.name.data, icon=form.icon.data or None)
        else:
            folder = folder_service.rename_folder(folder_id, form.name.data)
    else:
        folder = folder_service.set_icon(folder_id, form.icon.data or None)

    return jsonify(folder.to_dict())


@folders.route('/folders/<folder_id>', methods=['DELETE'])
def delete_folder(folder_id: str):
    deleted_count = cascade.delete_folder_tree(folder_id)
    return jsonify({'deletedCount': deleted_count})
