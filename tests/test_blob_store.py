import io
import os

import pytest

from foldertree.exceptions import NotFoundError
from foldertree.storage import LocalBlobStore


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(str(tmp_path / 'blobs'))


def test_put_keeps_extension_and_writes_bytes(store):
    key = store.put(io.BytesIO(b'payload'), 'Report Q1.PDF')

    assert key.endswith('.pdf')
    assert 'Report' not in key
    with open(store.resolve(key), 'rb') as f:
        assert f.read() == b'payload'


def test_same_name_never_collides(store):
    first = store.put(io.BytesIO(b'one'), 'photo.jpg')
    second = store.put(io.BytesIO(b'two'), 'photo.jpg')

    assert first != second
    assert store.exists(first)
    assert store.exists(second)


def test_put_leaves_no_partial_files(store):
    store.put(io.BytesIO(b'x' * 200_000), 'big.bin')

    assert not any(name.endswith('.part') for name in os.listdir(store.root))


def test_delete_is_idempotent(store):
    key = store.put(io.BytesIO(b'data'), 'a.txt')

    assert store.delete(key) is True
    assert store.delete(key) is False
    assert not store.exists(key)


def test_delete_swallows_os_errors(store, monkeypatch):
    key = store.put(io.BytesIO(b'data'), 'a.txt')

    def refuse(path):
        raise PermissionError('read-only filesystem')

    monkeypatch.setattr(os, 'remove', refuse)

    assert store.delete(key) is False


@pytest.mark.parametrize('key', ['../escape.txt', '', '.hidden', 'nested/key.txt'])
def test_resolve_rejects_keys_outside_root(store, key):
    with pytest.raises(NotFoundError):
        store.resolve(key)


def test_iter_keys_lists_stored_blobs(store):
    keys = {store.put(io.BytesIO(b'1'), 'a.txt'), store.put(io.BytesIO(b'2'), 'b.txt')}

    assert set(store.iter_keys()) == keys
