import logging
import time
import psutil
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from ..extensions import db

logger = logging.getLogger(__name__)

meta = Blueprint('meta', __name__)


def ping_store() -> float:
    """Round-trip a trivial query; returns the latency in milliseconds"""
    started = time.perf_counter()
    db.session.execute(text('SELECT 1'))
    return (time.perf_counter() - started) * 1000


def storage_usage(path: str) -> dict:
    try:
        usage = psutil.disk_usage(path)
    except OSError as e:
        logger.warning('Could not read disk usage for %s: %s', path, e)
        return {'path': path}
    return {
        'path': path,
        'total': usage.total,
        'used': usage.used,
        'free': usage.free,
        'percent': usage.percent
    }


@meta.route('/health')
def health():
    try:
        ping_store()
        store_state = 'connected'
    except SQLAlchemyError:
        db.session.rollback()
        store_state = 'disconnected'

    return jsonify({
        'ok': True,
        'storeState': store_state,
        'storage': storage_usage(current_app.config['UPLOAD_FOLDER'])
    })


@meta.route('/db-ping')
def db_ping():
    try:
        latency = ping_store()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning('Record store ping failed: %s', e)
        return jsonify({'ok': False, 'error': str(e.__class__.__name__)}), 500
    return jsonify({'ok': True, 'ping': {'ok': 1, 'latencyMs': round(latency, 3)}})
