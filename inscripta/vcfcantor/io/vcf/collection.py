"""
The parsed header of a VCF file: every ``##`` line in order, plus the ``#CHROM`` column header line.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.vcf.constants import (
    COLUMN_SEPARATOR,
    FIXED_COLUMNS,
    HEADER_PREFIX,
    VcfColumn,
    VcfMetadataType,
)
from inscripta.vcfcantor.io.vcf.exc import (
    DuplicateMetadataIdError,
    MalformedMetadataLineError,
    VersionMissingOrUnsupportedError,
)
from inscripta.vcfcantor.io.vcf.metadata import (
    FileFormatMetadata,
    SimpleMetadata,
    StructuredMetadata,
    VcfMetadataLine,
)
from inscripta.vcfcantor.util.object_validation import ObjectValidation


@dataclass(frozen=True)
class VcfColumnHeader:
    """
    The ``#CHROM`` line. ``has_format_column`` records whether the FORMAT column is present, which it must be when
    there are samples and may be when there are none.
    """

    sample_names: Tuple[str, ...] = ()
    has_format_column: bool = False

    def __post_init__(self):
        if self.sample_names and not self.has_format_column:
            raise ValidationException("A column header with samples must have a FORMAT column")
        ObjectValidation.require_unique(self.sample_names, "sample name")
        for name in self.sample_names:
            if COLUMN_SEPARATOR in name:
                raise ValidationException(f"Sample name {repr(name)} contains a tab")

    @staticmethod
    def from_sample_names(sample_names: Sequence[str]) -> "VcfColumnHeader":
        return VcfColumnHeader(tuple(sample_names), has_format_column=bool(sample_names))

    @staticmethod
    def from_line(line: str) -> "VcfColumnHeader":
        """
        Parse a ``#CHROM`` line.

        Raises:
            MalformedMetadataLineError: if the fixed columns are wrong or sample names repeat.
        """
        columns = line.split(COLUMN_SEPARATOR)
        names = [columns[0][len(HEADER_PREFIX) :]] + columns[1:]
        if tuple(names[: len(FIXED_COLUMNS)]) != FIXED_COLUMNS:
            raise MalformedMetadataLineError(
                f"Column header must start with #{' '.join(FIXED_COLUMNS)}"
            )
        extra = names[len(FIXED_COLUMNS) :]
        if extra and extra[0] != VcfColumn.FORMAT.value:
            raise MalformedMetadataLineError(f"Column {len(FIXED_COLUMNS) + 1} must be FORMAT, found {extra[0]}")
        try:
            return VcfColumnHeader(tuple(extra[1:]), has_format_column=bool(extra))
        except ValidationException as e:
            raise MalformedMetadataLineError(str(e)) from e

    @property
    def column_count(self) -> int:
        return len(FIXED_COLUMNS) + (1 + len(self.sample_names) if self.has_format_column else 0)

    def to_vcf_line(self) -> str:
        columns = list(FIXED_COLUMNS)
        if self.has_format_column:
            columns.append(VcfColumn.FORMAT.value)
            columns.extend(self.sample_names)
        return HEADER_PREFIX + COLUMN_SEPARATOR.join(columns)


class VcfMetadataCollection:
    """
    All header lines of a VCF file.

    ``lines`` holds the ``##`` lines in file order; the first must be the ``fileformat`` line. Structured lines are
    additionally indexed by ID per kind. PEDIGREE lines are kept as a list because their IDs need not be unique.

    Args:
        lines: The ``##`` lines, in file order.
        header: The column header.
        lines_processed: Lines consumed to produce this collection. Defaults to every ``##`` line plus the column
            header.

    Raises:
        VersionMissingOrUnsupportedError: if the first line is not a ``fileformat`` line.
        MalformedMetadataLineError: if a ``fileformat`` line appears anywhere else.
        DuplicateMetadataIdError: if two structured lines of the same kind share an ID.
    """

    def __init__(
        self,
        lines: Sequence[VcfMetadataLine],
        header: VcfColumnHeader,
        lines_processed: Optional[int] = None,
    ):
        self.lines: Tuple[VcfMetadataLine, ...] = tuple(lines)
        self.header = header
        self.lines_processed = len(self.lines) + 1 if lines_processed is None else lines_processed

        if not self.lines or not isinstance(self.lines[0], FileFormatMetadata):
            raise VersionMissingOrUnsupportedError("The first line must be ##fileformat=VCFv<version>", 1)

        self._by_id: Dict[VcfMetadataType, Dict[str, StructuredMetadata]] = {kind: {} for kind in VcfMetadataType}
        self.pedigree: List[StructuredMetadata] = []
        for line_number, line in enumerate(self.lines, 1):
            if line_number > 1 and isinstance(line, FileFormatMetadata):
                raise MalformedMetadataLineError(
                    "##fileformat may only appear on the first line", line_number, line.to_vcf_line()
                )
            if not isinstance(line, StructuredMetadata):
                continue
            if line.kind == VcfMetadataType.PEDIGREE:
                self.pedigree.append(line)
                continue
            by_id = self._by_id[line.kind]
            if line.id in by_id:
                raise DuplicateMetadataIdError(
                    f"Duplicate {line.kind.value} ID {line.id}", line_number, line.to_vcf_line()
                )
            by_id[line.id] = line

    def __repr__(self):
        return (
            f"VcfMetadataCollection(version={self.version}, lines={len(self.lines)}, "
            f"samples={len(self.sample_names)})"
        )

    def __eq__(self, other):
        if not isinstance(other, VcfMetadataCollection):
            return NotImplemented
        return self.lines == other.lines and self.header == other.header

    def __hash__(self):
        return hash((self.lines, self.header))

    @property
    def version(self) -> str:
        return self.lines[0].version

    @property
    def sample_names(self) -> Tuple[str, ...]:
        return self.header.sample_names

    @property
    def info(self) -> Dict[str, StructuredMetadata]:
        return self._by_id[VcfMetadataType.INFO]

    @property
    def format(self) -> Dict[str, StructuredMetadata]:
        return self._by_id[VcfMetadataType.FORMAT]

    @property
    def filter(self) -> Dict[str, StructuredMetadata]:
        return self._by_id[VcfMetadataType.FILTER]

    @property
    def alt(self) -> Dict[str, StructuredMetadata]:
        return self._by_id[VcfMetadataType.ALT]

    @property
    def contig(self) -> Dict[str, StructuredMetadata]:
        return self._by_id[VcfMetadataType.CONTIG]

    @property
    def sample(self) -> Dict[str, StructuredMetadata]:
        return self._by_id[VcfMetadataType.SAMPLE]

    def get_simple(self, key: str) -> List[str]:
        """Values of every ``##key=value`` line with this key, e.g. ``get_simple("pedigreeDB")``."""
        return [line.value for line in self.lines if isinstance(line, SimpleMetadata) and line.key == key]

    def to_vcf_lines(self) -> List[str]:
        """Every header line, ending with the column header."""
        return [line.to_vcf_line() for line in self.lines] + [self.header.to_vcf_line()]
