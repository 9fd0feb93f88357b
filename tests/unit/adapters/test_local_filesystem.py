import pytest
from rasterbridge.adapters.local_filesystem import LocalFileSystem

@pytest.fixture
def fs():
    return LocalFileSystem()

def test_plain_path(fs, tmp_path):
    f = tmp_path / "a.tif"
    f.write_bytes(b"abc")
    assert fs.local_path(str(f)) == f.resolve()
    assert fs.read_bytes(str(f)) == b"abc"

def test_file_uri_with_escapes(fs, tmp_path):
    f = tmp_path / "with space.tif"
    f.write_bytes(b"xyz")
    uri = f.as_uri()
    assert "%20" in uri
    assert fs.local_path(uri) == f.resolve()
    assert fs.read_bytes(uri) == b"xyz"

def test_missing_local_file(fs, tmp_path):
    missing = tmp_path / "nope.tif"
    assert fs.local_path(str(missing)) is None
    with pytest.raises(FileNotFoundError):
        fs.read_bytes(str(missing))

@pytest.mark.parametrize("uri", ["s3://bucket/a.tif", "https://example.com/a.tif"])
def test_remote_schemes_are_not_local(fs, uri):
    assert fs.local_path(uri) is None
    with pytest.raises(FileNotFoundError):
        fs.read_bytes(uri)
