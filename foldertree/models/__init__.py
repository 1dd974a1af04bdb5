from .folder import Folder
from .file import File

__all__ = ['Folder', 'File']
