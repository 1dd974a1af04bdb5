from flask import Flask, current_app

from .blob_store import LocalBlobStore

__all__ = ['LocalBlobStore', 'init_blob_store', 'get_blob_store']


def init_blob_store(app: Flask) -> LocalBlobStore:
    store = LocalBlobStore(app.config['UPLOAD_FOLDER'])
    app.extensions['blob_store'] = store
    return store


def get_blob_store() -> LocalBlobStore:
    return current_app.extensions['blob_store']
