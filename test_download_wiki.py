import bz2

import pytest

import download_wiki
from download_wiki import download_file, open_dump


class FakeResponse:
    def __init__(self, chunks):
        self.chunks = chunks
        self.headers = {"content-length": str(sum(len(c) for c in chunks))}

    def raise_for_status(self):
        pass

    def iter_content(self, block_size):
        return iter(self.chunks)


def test_download_file(tmp_path, monkeypatch):
    requested = []

    def fake_get(url, stream=False, timeout=None):
        requested.append(url)
        return FakeResponse([b"<mediawiki>", b"</mediawiki>"])

    monkeypatch.setattr(download_wiki.requests, "get", fake_get)
    target = tmp_path / "dumps" / "wiki.xml"

    assert download_file("https://example.org/wiki.xml", str(target)) == str(target)
    assert requested == ["https://example.org/wiki.xml"]
    assert target.read_bytes() == b"<mediawiki></mediawiki>"
    # The partial file was renamed into place
    assert not (tmp_path / "dumps" / "wiki.xml.part").exists()


def test_download_file_keeps_existing_file(tmp_path, monkeypatch):
    def fake_get(url, stream=False, timeout=None):
        raise AssertionError("should not download an existing file")

    monkeypatch.setattr(download_wiki.requests, "get", fake_get)
    target = tmp_path / "wiki.xml"
    target.write_bytes(b"already here")

    assert download_file("https://example.org/wiki.xml", str(target)) == str(target)
    assert target.read_bytes() == b"already here"


@pytest.mark.parametrize("compressed", [False, True])
def test_open_dump(tmp_path, compressed):
    data = b"<mediawiki />"
    if compressed:
        path = tmp_path / "dump.xml.bz2"
        path.write_bytes(bz2.compress(data))
    else:
        path = tmp_path / "dump.xml"
        path.write_bytes(data)

    with open_dump(str(path)) as dump:
        assert dump.read() == data
    assert dump.closed
