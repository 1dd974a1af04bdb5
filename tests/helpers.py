import io


def make_upload(name='notes.txt', content=b'hello', mime_type='text/plain'):
    """A (stream, filename, content_type) tuple for the test client's multipart encoder."""
    return (io.BytesIO(content), name, mime_type)


def create_folder(client, name, parent_id=None):
    response = client.post('/api/folders', json={'name': name, 'parentId': parent_id})
    assert response.status_code == 201, response.get_json()
    return response.get_json()['_id']


def upload(client, folder_id, *parts):
    return client.post(
        f'/api/upload/{folder_id}',
        data={'files': list(parts)},
        content_type='multipart/form-data',
    )
