from .folder import CreateFolderForm, UpdateFolderForm, was_submitted

__all__ = ['CreateFolderForm', 'UpdateFolderForm', 'was_submitted', 'first_error']


def first_error(form) -> str:
    """Flatten a form's errors into a single message for the JSON response"""
    if form.form_errors:
        return form.form_errors[0]
    for field_name, messages in form.errors.items():
        if field_name is None:
            continue
        if messages:
            return f'{field_name}: {messages[0]}'
    return 'Invalid request'
