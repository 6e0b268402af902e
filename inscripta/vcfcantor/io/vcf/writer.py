"""
Functions for writing VCF.

Each ``*_to_vcf`` function maps one parsed entity to one line of text without a trailing newline, and is the exact
inverse of the matching parser: writing a parsed line reproduces it. :func:`vcf_to_file` is the sink that writes a
whole file.
"""
import pathlib
from typing import Iterable, Optional, TextIO, Union

from inscripta.vcfcantor.io.handles import open_text_for_writing
from inscripta.vcfcantor.io.vcf.collection import VcfColumnHeader, VcfMetadataCollection
from inscripta.vcfcantor.io.vcf.constants import (
    ALT_SEPARATOR,
    COLUMN_SEPARATOR,
    FILTER_SEPARATOR,
    FORMAT_SEPARATOR,
    ID_SEPARATOR,
    MISSING_VALUE,
)
from inscripta.vcfcantor.io.vcf.metadata import VcfMetadataLine
from inscripta.vcfcantor.io.vcf.position import VcfPosition
from inscripta.vcfcantor.io.vcf.values import format_float


def metadata_line_to_vcf(line: VcfMetadataLine) -> str:
    return line.to_vcf_line()


def column_header_to_vcf(header: VcfColumnHeader) -> str:
    return header.to_vcf_line()


def position_to_vcf(position: VcfPosition) -> str:
    """
    Write one data line. Empty ID, ALT, FILTER and INFO columns and a missing QUAL are written as ``.``. The FORMAT
    and sample columns are written only when the record has a FORMAT column.
    """
    columns = [
        position.chromosome,
        str(position.position),
        ID_SEPARATOR.join(position.ids) if position.ids else MISSING_VALUE,
        position.ref.to_vcf_string(),
        ALT_SEPARATOR.join(a.to_vcf_string() for a in position.alts) if position.alts else MISSING_VALUE,
        MISSING_VALUE if position.quality is None else format_float(position.quality),
        FILTER_SEPARATOR.join(position.filters) if position.filters else MISSING_VALUE,
        position.info.to_vcf_string(),
    ]
    if position.format is not None:
        columns.append(FORMAT_SEPARATOR.join(position.format))
        columns.extend(sample.to_vcf_string(position.format) for sample in position.samples)
    return COLUMN_SEPARATOR.join(columns)


def vcf_to_file(
    metadata: VcfMetadataCollection,
    positions: Iterable[VcfPosition],
    vcf_handle_or_path: Union[TextIO, str, pathlib.Path],
    bgzip: Optional[bool] = None,
):
    """
    Write a complete VCF file: every header line, the column header, then one line per position.

    Args:
        metadata: The header to write.
        positions: Records to write, in order. Consumed lazily.
        vcf_handle_or_path: Open file handle or path to write to.
        bgzip: Compress the output as BGZF. Defaults to ``True`` for paths ending in ``.gz`` or ``.bgz``.
    """
    with open_text_for_writing(vcf_handle_or_path, bgzip=bgzip) as vcf_handle:
        for line in metadata.to_vcf_lines():
            print(line, file=vcf_handle)
        for position in positions:
            print(position_to_vcf(position), file=vcf_handle)
