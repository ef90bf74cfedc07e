import pytest

PIECES = bytes(range(40))

TORRENT = (
    b"d8:announce35:http://tracker.example.org/announce"
    b"10:created by8:bencodec"
    b"4:infod6:lengthi1048576e4:name8:file.bin12:piece lengthi262144e"
    b"6:pieces40:" + PIECES + b"ee"
)

# map keys out of order, nested list with an empty map
UNSORTED = (
    b"d4:key2de4:key116:some string1:2#3"
    b"6:4:listl16:some string1:2#3i1234567890edeee"
)
CANONICAL = (
    b"d6:4:listl16:some string1:2#3i1234567890edee"
    b"4:key116:some string1:2#34:key2dee"
)


@pytest.fixture
def torrent_bytes():
    return TORRENT


@pytest.fixture
def torrent_file(tmp_path):
    path = tmp_path / "sample.torrent"
    path.write_bytes(TORRENT)
    return path


@pytest.fixture
def unsorted_file(tmp_path):
    path = tmp_path / "unsorted.bencode"
    path.write_bytes(UNSORTED)
    return path
