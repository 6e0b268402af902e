"""
Open paths for reading and writing text, or pass already-open handles through.

Paths ending in ``.gz`` or ``.bgz`` are compressed. They are read with :mod:`gzip`, which understands both plain
gzip and BGZF, and written as BGZF with :mod:`Bio.bgzf` so that output can be indexed with tabix.
"""
import gzip
import pathlib
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO, Union

from Bio import bgzf

from inscripta.vcfcantor.io.exc import UnsupportedHandleError

COMPRESSED_SUFFIXES = (".gz", ".bgz")


def is_compressed_path(path: Union[str, pathlib.Path]) -> bool:
    return str(path).endswith(COMPRESSED_SUFFIXES)


@contextmanager
def open_text_for_reading(handle_or_path: Union[TextIO, str, pathlib.Path]) -> Iterator[TextIO]:
    """Yields a readable text handle. Handles that were passed in are left open."""
    if not isinstance(handle_or_path, (str, pathlib.Path)):
        if not hasattr(handle_or_path, "read"):
            raise UnsupportedHandleError(f"Cannot read VCF from {type(handle_or_path).__name__}")
        yield handle_or_path
        return
    if is_compressed_path(handle_or_path):
        handle = gzip.open(handle_or_path, "rt", encoding="utf-8")
    else:
        handle = open(handle_or_path, "r", encoding="utf-8")
    try:
        yield handle
    finally:
        handle.close()


@contextmanager
def open_text_for_writing(
    handle_or_path: Union[TextIO, str, pathlib.Path], bgzip: Optional[bool] = None
) -> Iterator[TextIO]:
    """
    Yields a writable text handle. Handles that were passed in are left open.

    Args:
        handle_or_path: Open handle or path to write to.
        bgzip: Write BGZF. Defaults to ``True`` for paths ending in ``.gz`` or ``.bgz``. Ignored for handles.
    """
    if not isinstance(handle_or_path, (str, pathlib.Path)):
        if not hasattr(handle_or_path, "write"):
            raise UnsupportedHandleError(f"Cannot write VCF to {type(handle_or_path).__name__}")
        yield handle_or_path
        return
    if bgzip is None:
        bgzip = is_compressed_path(handle_or_path)
    if bgzip:
        handle = bgzf.BgzfWriter(str(handle_or_path), "wb")
    else:
        handle = open(handle_or_path, "w", encoding="utf-8")
    try:
        yield handle
    finally:
        handle.close()
