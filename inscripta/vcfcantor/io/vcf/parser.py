"""
VCF parsers.

Parsing is pull-based and stateful: a :class:`LineCursor` hands out one line at a time, :class:`VcfMetadataParser`
consumes the header lines from it and stops in front of the first data line, and :class:`VcfDataParser` continues
from the same cursor, producing one :class:`~inscripta.vcfcantor.io.vcf.position.VcfPosition` per line. Parser
instances track how many lines they consumed and are meant for a single input.

Every error raised while parsing a line carries that line's 1-based number and text.

:func:`parse_vcf` wires the pieces together for a file handle or path.
"""
import logging
import pathlib
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.handles import open_text_for_reading
from inscripta.vcfcantor.io.vcf.alleles import parse_allele
from inscripta.vcfcantor.io.vcf.collection import VcfColumnHeader, VcfMetadataCollection
from inscripta.vcfcantor.io.vcf.constants import (
    ALT_SEPARATOR,
    COLUMN_HEADER_PREFIX,
    COLUMN_SEPARATOR,
    DEFAULT_LOG_EVERY,
    FILTER_SEPARATOR,
    FIXED_COLUMNS,
    FORMAT_SEPARATOR,
    HEADER_PREFIX,
    ID_SEPARATOR,
    INFO_SEPARATOR,
    KEY_VALUE_SEPARATOR,
    KNOWN_VERSIONS,
    METADATA_PREFIX,
    MISSING_VALUE,
)
from inscripta.vcfcantor.io.vcf.exc import (
    ColumnCountMismatchError,
    InvalidNumberError,
    MalformedDataLineError,
    MalformedMetadataLineError,
    SampleCountMismatchError,
    VcfParserError,
    VersionMissingOrUnsupportedError,
)
from inscripta.vcfcantor.io.vcf.metadata import FileFormatMetadata, VcfMetadataLine, parse_metadata_line
from inscripta.vcfcantor.io.vcf.position import VcfPosition
from inscripta.vcfcantor.io.vcf.properties import VcfInfo, VcfSample
from inscripta.vcfcantor.io.vcf.values import parse_float, parse_integer

logger = logging.getLogger(__name__)


class LineCursor:
    """
    Iterates over lines with one line of lookahead. Trailing ``\\n`` and ``\\r\\n`` are removed.

    ``line_number`` is the 1-based number of the last line handed out by ``next()``.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self._peeked: Optional[str] = None
        self.line_number = 0

    def __iter__(self) -> "LineCursor":
        return self

    def __next__(self) -> str:
        if self._peeked is not None:
            line, self._peeked = self._peeked, None
        else:
            line = self._read()
        self.line_number += 1
        return line

    def _read(self) -> str:
        line = next(self._lines)
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line

    def peek(self) -> Optional[str]:
        """The next line without consuming it, or ``None`` at the end of input."""
        if self._peeked is None:
            try:
                self._peeked = self._read()
            except StopIteration:
                return None
        return self._peeked


def _as_cursor(lines: Union[Iterable[str], LineCursor]) -> LineCursor:
    return lines if isinstance(lines, LineCursor) else LineCursor(lines)


class VcfMetadataParser:
    """
    Parses the header of a VCF file. Lines are consumed while they start with ``#``; the first line that does not is
    left on the cursor.
    """

    def __init__(self):
        self.lines_processed = 0

    def parse(self, lines: Union[Iterable[str], LineCursor]) -> VcfMetadataCollection:
        """
        Args:
            lines: Lines of a VCF file, or a cursor positioned at its first line.

        Returns:
            The header, with ``lines_processed`` set to the number of lines consumed.

        Raises:
            VersionMissingOrUnsupportedError: if the first line is not ``##fileformat=VCFv<version>``.
            MalformedMetadataLineError: if a header line cannot be parsed or the column header is missing.
            MissingRequiredTagError: if a structured line lacks a required sub-tag.
        """
        cursor = _as_cursor(lines)
        metadata_lines: List[VcfMetadataLine] = []
        header: Optional[VcfColumnHeader] = None

        while True:
            line = cursor.peek()
            if line is None or not line.startswith(HEADER_PREFIX):
                break
            next(cursor)
            self.lines_processed += 1
            try:
                if header is not None:
                    raise MalformedMetadataLineError("Header lines must not follow the #CHROM line")
                if line.startswith(METADATA_PREFIX):
                    parsed = parse_metadata_line(line)
                    if not metadata_lines and not isinstance(parsed, FileFormatMetadata):
                        raise VersionMissingOrUnsupportedError(
                            f"First line is {line}; expected ##fileformat=VCFv<version>"
                        )
                    metadata_lines.append(parsed)
                elif line.startswith(COLUMN_HEADER_PREFIX):
                    if not metadata_lines:
                        raise VersionMissingOrUnsupportedError("The #CHROM line must follow ##fileformat=VCFv<version>")
                    header = VcfColumnHeader.from_line(line)
                else:
                    raise MalformedMetadataLineError("Header lines must start with ## or #CHROM")
            except VcfParserError as e:
                raise e.with_line_context(cursor.line_number, line)

        if not metadata_lines:
            raise VersionMissingOrUnsupportedError(
                "Input does not start with ##fileformat=VCFv<version>", cursor.line_number + 1, cursor.peek()
            )
        if header is None:
            raise MalformedMetadataLineError("Header has no #CHROM line", cursor.line_number + 1, cursor.peek())

        collection = VcfMetadataCollection(metadata_lines, header, self.lines_processed)
        if collection.version not in KNOWN_VERSIONS:
            logger.warning(f"VCF version {collection.version} is not one of {', '.join(KNOWN_VERSIONS)}")
        logger.debug(
            f"Parsed {self.lines_processed} header lines with {len(collection.sample_names)} samples "
            f"(VCF version {collection.version})"
        )
        return collection


def _parse_position(text: str) -> int:
    position = parse_integer(text, "Position")
    if str(position) != text:
        raise InvalidNumberError(f"Position {repr(text)} must be written without a plus sign or leading zeros")
    return position


def _split_optional(column: str, separator: str) -> Tuple[str, ...]:
    return () if column == MISSING_VALUE else tuple(column.split(separator))


def _parse_info(column: str) -> VcfInfo:
    if column == MISSING_VALUE:
        return VcfInfo()
    entries = []
    seen = set()
    for entry in column.split(INFO_SEPARATOR):
        key, sep, value = entry.partition(KEY_VALUE_SEPARATOR)
        if not key:
            raise MalformedDataLineError(f"INFO entry {repr(entry)} has no key")
        if key in seen:
            raise MalformedDataLineError(f"INFO key {key} appears more than once")
        seen.add(key)
        entries.append((key, value if sep else None))
    return VcfInfo(entries)


def parse_data_line(line: str, sample_names: Sequence[str]) -> VcfPosition:
    """
    Parse one data line.

    The line must have 9 columns plus one per sample, or exactly 8 when there are no samples. Sample columns may
    hold fewer fields than FORMAT declares; the missing trailing keys are absent from that sample.

    Args:
        line: The line, without its trailing newline.
        sample_names: Sample names from the column header.

    Raises:
        ColumnCountMismatchError: if the column count does not match the samples.
        SampleCountMismatchError: if a sample column has more fields than FORMAT.
        InvalidNumberError: if POS or QUAL is not a number.
        AlleleSyntaxError: if REF or an ALT allele is malformed.
        MalformedDataLineError: for any other malformed content.
    """
    if line.startswith(HEADER_PREFIX):
        raise MalformedDataLineError("Data line looks like a header line")
    columns = line.split(COLUMN_SEPARATOR)
    expected = len(FIXED_COLUMNS) + 1 + len(sample_names)
    if len(columns) != expected and not (not sample_names and len(columns) == len(FIXED_COLUMNS)):
        raise ColumnCountMismatchError(
            f"Expected {expected} columns for {len(sample_names)} samples, found {len(columns)}"
        )

    chromosome, pos, ids, ref, alts, quality, filters, info = columns[: len(FIXED_COLUMNS)]
    format_keys = None
    samples = []
    try:
        if len(columns) > len(FIXED_COLUMNS):
            format_keys = tuple(columns[len(FIXED_COLUMNS)].split(FORMAT_SEPARATOR))
            for name, column in zip(sample_names, columns[len(FIXED_COLUMNS) + 1 :]):
                values = column.split(FORMAT_SEPARATOR)
                if len(values) > len(format_keys):
                    raise SampleCountMismatchError(
                        f"Sample {name} has {len(values)} fields but FORMAT declares {len(format_keys)}"
                    )
                samples.append(VcfSample(zip(format_keys, values)))

        return VcfPosition(
            chromosome=chromosome,
            position=_parse_position(pos),
            ref=parse_allele(ref),
            alts=[parse_allele(token) for token in _split_optional(alts, ALT_SEPARATOR)],
            ids=_split_optional(ids, ID_SEPARATOR),
            quality=None if quality == MISSING_VALUE else parse_float(quality, "Quality"),
            filters=_split_optional(filters, FILTER_SEPARATOR),
            info=_parse_info(info),
            format=format_keys,
            samples=samples,
        )
    except ValidationException as e:
        raise MalformedDataLineError(str(e)) from e


class VcfDataParser:
    """
    Parses data lines into positions.

    Args:
        sample_names: Sample names from the column header.
        log_every: Log a progress message at DEBUG level every this many lines. ``0`` disables it.
    """

    def __init__(self, sample_names: Sequence[str] = (), log_every: int = DEFAULT_LOG_EVERY):
        self.sample_names = tuple(sample_names)
        self.log_every = log_every
        self.lines_processed = 0

    def parse_line(self, line: str, line_number: Optional[int] = None) -> VcfPosition:
        self.lines_processed += 1
        try:
            return parse_data_line(line, self.sample_names)
        except VcfParserError as e:
            raise e.with_line_context(self.lines_processed if line_number is None else line_number, line)

    def parse(self, lines: Union[Iterable[str], LineCursor]) -> Iterator[VcfPosition]:
        """
        Lazily parse every remaining line.

        Args:
            lines: Data lines, or the cursor a :class:`VcfMetadataParser` stopped on.

        Yields:
            One position per line.
        """
        cursor = _as_cursor(lines)
        for line in cursor:
            position = self.parse_line(line, cursor.line_number)
            if self.log_every and self.lines_processed % self.log_every == 0:
                logger.debug(f"Parsed {self.lines_processed} data lines; at {position.locus}")
            yield position


def _read_lines(vcf_handle_or_path: Union[TextIO, str, pathlib.Path]) -> Iterator[str]:
    with open_text_for_reading(vcf_handle_or_path) as vcf_handle:
        yield from vcf_handle


def parse_vcf(
    vcf_handle_or_path: Union[TextIO, str, pathlib.Path],
    log_every: int = DEFAULT_LOG_EVERY,
) -> Tuple[VcfMetadataCollection, Iterator[VcfPosition]]:
    """
    Parse a VCF file. The header is read immediately; positions are parsed as the returned iterator is consumed.
    A file opened from a path is closed once the iterator is exhausted.

    Args:
        vcf_handle_or_path: An open VCF file or a path to one. Paths ending in ``.gz`` or ``.bgz`` are
            decompressed.
        log_every: See :class:`VcfDataParser`.

    Returns:
        The header and an iterator over positions.
    """
    cursor = LineCursor(_read_lines(vcf_handle_or_path))
    metadata = VcfMetadataParser().parse(cursor)
    positions = VcfDataParser(metadata.sample_names, log_every=log_every).parse(cursor)
    return metadata, positions
