from . import folders, files, cascade, uploads

__all__ = ['folders', 'files', 'cascade', 'uploads']
