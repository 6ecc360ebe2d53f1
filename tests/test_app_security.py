"""Tests for app.py: security headers, error handlers, SQLite pragmas."""


def test_security_headers_present(client):
    """Every response carries the security headers."""
    resp = client.get('/')
    assert resp.headers.get('X-Content-Type-Options') == 'nosniff'
    assert resp.headers.get('X-Frame-Options') == 'SAMEORIGIN'
    assert 'Content-Security-Policy' in resp.headers


def test_headers_on_error_responses(client):
    resp = client.get('/dashboard/999')
    assert resp.status_code == 404
    assert resp.headers.get('X-Content-Type-Options') == 'nosniff'


def test_csp_allows_inline_styles_and_data_images(client):
    """The rating chart is served as SVG; data: URIs stay allowed for embeds."""
    csp = client.get('/').headers.get('Content-Security-Policy')
    assert "'unsafe-inline'" in csp
    assert "img-src 'self' data:" in csp


def test_error_handler_hides_details(app):
    """Unhandled exceptions never leak their message to the client."""
    @app.route('/test-500')
    def crash():
        raise RuntimeError('secret database password is xyz123')

    with app.test_client() as c:
        resp = c.get('/test-500')
        assert resp.status_code == 500
        body = resp.data.decode()
        assert 'secret database password' not in body
        assert 'xyz123' not in body
        assert 'Internal Server Error' in body


def test_unknown_route_is_json_404(client):
    resp = client.get('/no-such-page')
    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Not Found'}


def test_wal_mode_set(temp_db):
    """SQLite WAL mode should be enabled."""
    from db.database import get_db
    conn = get_db()
    try:
        result = conn.execute('PRAGMA journal_mode').fetchone()
        assert result[0] == 'wal'
    finally:
        conn.close()


def test_foreign_keys_enabled(temp_db):
    from db.database import get_db
    conn = get_db()
    try:
        result = conn.execute('PRAGMA foreign_keys').fetchone()
        assert result[0] == 1
    finally:
        conn.close()
