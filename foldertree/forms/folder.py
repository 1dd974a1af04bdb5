from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional, ValidationError


def was_submitted(field) -> bool:
    """True if the request body carried the field at all, even as null"""
    return bool(field.raw_data)


class CreateFolderForm(FlaskForm):
    name = StringField('Name', validators=[
        DataRequired(message='Folder name is required'),
        Length(max=255)
    ])
    parentId = StringField('Parent folder', validators=[
        Optional(),
        Length(max=32)
    ])
    icon = StringField('Icon', validators=[Optional()])


class UpdateFolderForm(FlaskForm):
    name = StringField('Name', validators=[Length(max=255)])
    icon = StringField('Icon')

    def validate_name(self, field):
        if was_submitted(field) and not (field.data or '').strip():
            raise ValidationError('Folder name is required')

    def validate(self, extra_validators=None):
        if not super().validate(extra_validators):
            return False
        if not was_submitted(self.name) and not was_submitted(self.icon):
            self.form_errors.append('Nothing to update: send a name or an icon')
            return False
        return True
