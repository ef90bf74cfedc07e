import io
import sys
import types

import httpx
import pytest

from bencodec import sources
from bencodec.bencoding import DecodingError
from bencodec.values import Integer, Map

from .conftest import CANONICAL, UNSORTED

URL = "http://tracker.example.org/announce?info_hash=x"


def mock_client(status=200, content=b""):
    def handler(request):
        return httpx.Response(status, content=content)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_read_file(torrent_file, torrent_bytes):
    assert sources.read_source(str(torrent_file)) == torrent_bytes


def test_read_missing_file(tmp_path):
    with pytest.raises(sources.SourceError) as e:
        sources.read_source(str(tmp_path / "missing.torrent"))
    assert isinstance(e.value.__cause__, OSError)


def test_read_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", types.SimpleNamespace(buffer=io.BytesIO(b"i1e")))
    assert sources.read_source("-") == b"i1e"


def test_fetch_url():
    with mock_client(content=b"d8:intervali1800ee") as client:
        value = sources.load(URL, client=client)
    assert value == Map({b"interval": Integer(1800)})


def test_fetch_follows_redirects():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "/new"})
        return httpx.Response(200, content=b"i7e")

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        assert sources.read_source("https://example.org/old", client) == b"i7e"


def test_fetch_http_error():
    with mock_client(status=404) as client:
        with pytest.raises(sources.SourceError, match="HTTP 404"):
            sources.read_source(URL, client)


def test_fetch_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(sources.SourceError, match="connection refused"):
            sources.read_source(URL, client)


def test_load_malformed(tmp_path):
    path = tmp_path / "bad.bencode"
    path.write_bytes(b"d4:teste")
    with pytest.raises(DecodingError):
        sources.load(str(path))


def test_load_lenient(tmp_path):
    path = tmp_path / "lenient.bencode"
    path.write_bytes(b"i03e")
    assert sources.load(str(path), strict=False) == Integer(3)


def test_save_writes_canonical(tmp_path, unsorted_file):
    value = sources.load(str(unsorted_file))
    out = tmp_path / "out.bencode"
    sources.save(value, str(out))
    assert out.read_bytes() == CANONICAL
    assert out.read_bytes() != UNSORTED
