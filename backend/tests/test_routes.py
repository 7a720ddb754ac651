from drawphone import __version__


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'ok'
    assert data['version'] == __version__
    assert 'timestamp' in data


def test_status_lists_live_connections(client, sio_factory):
    assert client.get('/api/status').get_json()['connections']['count'] == 0

    first = sio_factory()
    sio_factory()
    data = client.get('/api/status').get_json()
    assert data['connections']['count'] == 2
    assert all(s['connected'] for s in data['connections']['sockets'])

    first.disconnect()
    assert client.get('/api/status').get_json()['connections']['count'] == 1


def test_rooms_listing_and_detail(client, sio_factory):
    assert client.get('/api/rooms').get_json() == {'rooms': []}

    host = sio_factory()
    host.emit('create-room', {'nickname': 'Alice'})
    code = [p for p in host.get_received() if p['name'] == 'room-created'][0]['args'][0]['code']

    assert client.get('/api/rooms').get_json()['rooms'] == [{'code': code, 'playerCount': 1, 'locked': False}]

    detail = client.get(f'/api/rooms/{code}')
    assert detail.status_code == 200
    body = detail.get_json()
    assert body['code'] == code
    assert body['drawingCount'] == 0
    assert 'drawings' not in body


def test_unknown_room_is_404(client):
    res = client.get('/api/rooms/ZZZZ')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'room_not_found'}
