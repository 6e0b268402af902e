import gzip
import io

import pytest

from inscripta.vcfcantor.io.exc import UnsupportedHandleError
from inscripta.vcfcantor.io.handles import is_compressed_path, open_text_for_reading, open_text_for_writing


@pytest.mark.parametrize(
    "path,compressed",
    [("a.vcf", False), ("a.vcf.gz", True), ("a.vcf.bgz", True), ("a.gz.vcf", False)],
)
def test_is_compressed_path(path, compressed):
    assert is_compressed_path(path) is compressed


class TestOpenText:
    def test_plain(self, tmp_path):
        path = tmp_path / "a.txt"
        with open_text_for_writing(path) as fh:
            fh.write("one\ntwo\n")
        with open_text_for_reading(str(path)) as fh:
            assert fh.read() == "one\ntwo\n"

    def test_compressed(self, tmp_path):
        path = tmp_path / "a.txt.gz"
        with open_text_for_writing(path) as fh:
            fh.write("one\ntwo\n")
        with gzip.open(path, "rt") as fh:
            assert fh.read() == "one\ntwo\n"
        with open_text_for_reading(path) as fh:
            assert list(fh) == ["one\n", "two\n"]

    def test_handles_left_open(self):
        handle = io.StringIO("text")
        with open_text_for_reading(handle) as fh:
            assert fh is handle
        assert not handle.closed
        with open_text_for_writing(handle) as fh:
            assert fh is handle
        assert not handle.closed

    def test_unsupported(self):
        with pytest.raises(UnsupportedHandleError):
            with open_text_for_reading(42):
                pass
        with pytest.raises(UnsupportedHandleError):
            with open_text_for_writing(object()):
                pass
