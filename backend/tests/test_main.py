def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json() == {'status': 'ok'}


def test_index_served_from_front_dir(flask_app, client, tmp_path):
    (tmp_path / 'index.html').write_text('<h1>Battleship</h1>')
    flask_app.config['FRONT_DIR'] = str(tmp_path)
    res = client.get('/')
    assert res.status_code == 200
    assert b'Battleship' in res.data


def test_asset_served_from_front_dir(flask_app, client, tmp_path):
    (tmp_path / 'js').mkdir()
    (tmp_path / 'js' / 'app.js').write_text('console.log(1)')
    flask_app.config['FRONT_DIR'] = str(tmp_path)
    res = client.get('/js/app.js')
    assert res.status_code == 200
    assert res.data == b'console.log(1)'


def test_missing_file_is_404(flask_app, client, tmp_path):
    flask_app.config['FRONT_DIR'] = str(tmp_path)
    res = client.get('/nope.css')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Not found'
