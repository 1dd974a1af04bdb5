from datetime import datetime
from ..extensions import db
from .folder import generate_id


class File(db.Model):
    """Metadata of an uploaded file; the bytes live in the blob store under storage_key."""
    __tablename__ = 'files'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(255), nullable=False)  # Original name as uploaded
    size = db.Column(db.BigInteger, nullable=False)
    mime_type = db.Column(db.String(255))
    storage_key = db.Column(db.String(255), unique=True, nullable=False)
    folder_id = db.Column(db.String(32), db.ForeignKey('folders.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    folder = db.relationship('Folder', back_populates='files')

    def __init__(self, name: str, size: int, mime_type: str, storage_key: str, folder_id: str) -> None:
        self.id = generate_id()
        self.name = name
        self.size = size
        self.mime_type = mime_type
        self.storage_key = storage_key
        self.folder_id = folder_id

    def __repr__(self) -> str:
        return f'<File {self.id}: {self.name}>'

    def to_dict(self, url: str = None) -> dict:
        return {
            '_id': self.id,
            'name': self.name,
            'size': self.size,
            'mimeType': self.mime_type,
            'storageKey': self.storage_key,
            'folderId': self.folder_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'url': url
        }
