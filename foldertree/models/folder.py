from datetime import datetime
import uuid
from ..extensions import db


def generate_id() -> str:
    return uuid.uuid4().hex


class Folder(db.Model):
    """
    A node of the folder tree.

    Children and contained files are never stored on the row; the
    `children` and `files` relationships are evaluated from the forward
    links (`parent_id`, `File.folder_id`) every time they are read.
    """
    __tablename__ = 'folders'
    __table_args__ = (
        # NULLs are distinct, so only one row may carry is_root=True
        db.Index('uq_folders_single_root', 'is_root', unique=True),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(255), nullable=False)
    parent_id = db.Column(db.String(32), db.ForeignKey('folders.id'), nullable=True, index=True)
    is_root = db.Column(db.Boolean, nullable=True)
    icon = db.Column(db.Text, nullable=True)  # Display token: marker, glyph or data URL
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    parent = db.relationship('Folder', remote_side=[id],
                             backref=db.backref('children', lazy='dynamic', passive_deletes='all'))
    files = db.relationship('File', back_populates='folder', lazy='dynamic', passive_deletes='all')

    def __init__(self, name: str, parent_id: str = None, icon: str = None, is_root: bool = None) -> None:
        self.id = generate_id()
        self.name = name
        self.parent_id = parent_id
        self.icon = icon
        self.is_root = is_root

    def __repr__(self) -> str:
        return f'<Folder {self.id}: {self.name}>'

    def to_dict(self, include_contents: bool = False) -> dict:
        data = {
            '_id': self.id,
            'name': self.name,
            'parentId': self.parent_id,
            'icon': self.icon,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_contents:
            data['children'] = [child.id for child in self.children]
            data['files'] = [file.id for file in self.files]
        return data
