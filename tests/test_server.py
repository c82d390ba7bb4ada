"""
Dev Server Tests

Path resolution against a temporary output tree, plus HTTP requests
through aiohttp's test client.

Run with: pytest tests/test_server.py -v
"""

import asyncio
from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient, TestServer

from staticflow.server import (
    NOT_FOUND_BODY,
    content_type_for,
    create_app,
    resolve_file,
)


@pytest.fixture
def output_dir(tmp_path):
    """A small built site."""
    out = tmp_path / 'public'
    (out / 'blog').mkdir(parents=True)
    (out / 'assets').mkdir()
    (out / 'index.html').write_text('<h1>Home</h1>')
    (out / 'about.html').write_text('<h1>About</h1>')
    (out / 'blog' / 'index.html').write_text('<h1>Blog</h1>')
    (out / 'assets' / 'site.css').write_text('body{margin:0}')
    (out / 'assets' / 'logo.png').write_bytes(b'\x89PNG\r\n')
    (out / 'notes.md').write_text('# notes')
    (tmp_path / 'secret.html').write_text('outside')
    return out


def fetch(output_dir: Path, path: str):
    """GET path from a fresh app; returns (status, content_type, body)."""
    async def _fetch():
        client = TestClient(TestServer(create_app(output_dir)))
        await client.start_server()
        try:
            resp = await client.get(path)
            return resp.status, resp.content_type, await resp.read()
        finally:
            await client.close()

    return asyncio.run(_fetch())


class TestContentTypeFor:
    """Tests for the extension -> content type table."""

    @pytest.mark.parametrize('name, expected', [
        ('index.html', 'text/html'),
        ('site.css', 'text/css'),
        ('app.js', 'text/javascript'),
        ('logo.png', 'image/png'),
        ('photo.jpg', 'image/jpeg'),
        ('icon.svg', 'image/svg+xml'),
        ('favicon.ico', 'image/x-icon'),
        ('data.json', 'application/json'),
        ('font.woff', 'font/woff'),
        ('font.woff2', 'font/woff2'),
    ])
    def test_known(self, name, expected):
        assert content_type_for(Path(name)) == expected

    def test_unknown_defaults_to_plain_text(self):
        """Anything not in the table is text/plain."""
        assert content_type_for(Path('notes.md')) == 'text/plain'
        assert content_type_for(Path('photo.jpeg')) == 'text/plain'


class TestResolveFile:
    """Tests for request path -> file mapping."""

    def test_root_serves_index(self, output_dir):
        assert resolve_file(output_dir, '/') == (output_dir / 'index.html').resolve()

    def test_directory_serves_index(self, output_dir):
        assert resolve_file(output_dir, '/blog') == (output_dir / 'blog' / 'index.html').resolve()
        assert resolve_file(output_dir, '/blog/') == (output_dir / 'blog' / 'index.html').resolve()

    def test_extensionless_gets_html(self, output_dir):
        """/about is answered by about.html."""
        assert resolve_file(output_dir, '/about') == (output_dir / 'about.html').resolve()

    def test_exact_file(self, output_dir):
        assert resolve_file(output_dir, '/assets/site.css') == (output_dir / 'assets' / 'site.css').resolve()

    def test_missing(self, output_dir):
        assert resolve_file(output_dir, '/nope') is None
        assert resolve_file(output_dir, '/nope.css') is None

    def test_directory_without_index(self, output_dir):
        assert resolve_file(output_dir, '/assets') is None

    def test_null_byte(self, output_dir):
        """Paths the OS cannot represent are simply not found."""
        assert resolve_file(output_dir, '/a\x00b') is None

    def test_traversal_blocked(self, output_dir):
        """Paths that escape the output directory are never served."""
        assert resolve_file(output_dir, '/../secret.html') is None
        assert resolve_file(output_dir, '/blog/../../secret') is None


class TestServeFile:
    """HTTP behaviour of the dev server."""

    def test_index(self, output_dir):
        status, content_type, body = fetch(output_dir, '/')

        assert status == 200
        assert content_type == 'text/html'
        assert body == b'<h1>Home</h1>'

    def test_nested_index(self, output_dir):
        status, _, body = fetch(output_dir, '/blog/')

        assert status == 200
        assert body == b'<h1>Blog</h1>'

    def test_extensionless(self, output_dir):
        status, content_type, body = fetch(output_dir, '/about')

        assert status == 200
        assert content_type == 'text/html'
        assert body == b'<h1>About</h1>'

    def test_stylesheet(self, output_dir):
        status, content_type, body = fetch(output_dir, '/assets/site.css')

        assert status == 200
        assert content_type == 'text/css'
        assert body == b'body{margin:0}'

    def test_binary(self, output_dir):
        status, content_type, body = fetch(output_dir, '/assets/logo.png')

        assert status == 200
        assert content_type == 'image/png'
        assert body == b'\x89PNG\r\n'

    def test_unknown_type(self, output_dir):
        _, content_type, _ = fetch(output_dir, '/notes.md')

        assert content_type == 'text/plain'

    def test_not_found(self, output_dir):
        status, content_type, body = fetch(output_dir, '/missing')

        assert status == 404
        assert content_type == 'text/plain'
        assert body.decode() == NOT_FOUND_BODY

    def test_null_byte_is_not_found(self, output_dir):
        status, _, body = fetch(output_dir, '/a%00b')

        assert status == 404
        assert body.decode() == NOT_FOUND_BODY

    def test_output_removed(self, tmp_path):
        """A missing output directory gives 404s, not errors."""
        status, _, _ = fetch(tmp_path / 'public', '/')

        assert status == 404
