"""
Alleles as they appear in the REF and ALT columns.

Every allele is an immutable value that keeps exactly the text needed to reproduce its token, so
``parse_allele(token).to_vcf_string() == token`` for every token :func:`parse_allele` accepts.

The forms are:

* :class:`VcfBasesAllele`: explicit bases, e.g. ``A`` or ``GTCT``. Indels are not a separate form; they are implied
  by a length difference between REF and ALT.
* :class:`VcfMissingAllele`: ``.``
* :class:`VcfDeletionAllele`: ``*``, an allele removed by an overlapping upstream deletion.
* :class:`VcfInsertionAllele`: bases joined to an assembled contig, e.g. ``C<ctg1>``.
* :class:`VcfSymbolicAllele`: ``<ID>``, e.g. ``<DEL>`` or ``<DUP:TANDEM>``.
* :class:`VcfBreakendAllele`: rearrangement junctions, e.g. ``G]17:198982]``, and single breakends such as ``.A``.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from Bio.Seq import Seq

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.vcf.constants import MISSING_VALUE, ReservedStructuralVariantCode
from inscripta.vcfcantor.io.vcf.exc import AlleleSyntaxError
from inscripta.vcfcantor.location import Locus

BASES_PATTERN = re.compile(r"[ACGTNacgtn]+")
SYMBOLIC_PATTERN = re.compile(r"<([^<>]+)>")
INSERTION_PATTERN = re.compile(r"(?:([ACGTNacgtn]+)<([^<>]+)>)|(?:<([^<>]+)>([ACGTNacgtn]+))")
BREAKEND_PATTERN = re.compile(r"([ACGTNacgtn]*)([\[\]])([^\[\]]+)\2([ACGTNacgtn]*)")
SINGLE_BREAKEND_PATTERN = re.compile(r"(?:\.([ACGTNacgtn]+))|(?:([ACGTNacgtn]+)\.)")
MATE_POSITION_PATTERN = re.compile(r"0|[1-9][0-9]*")
DELETION_TOKEN = "*"
SINGLE_BREAKEND_TOKEN = "."


class BreakendOrientation(Enum):
    """
    Which way the joined sequence extends from the mate position. ``[`` means the sequence to the right of the mate
    is joined; ``]`` means the sequence to the left of it is joined.
    """

    FORWARD = "["
    REVERSE = "]"


class VcfAllele(ABC):
    """Base of every allele form."""

    @abstractmethod
    def to_vcf_string(self) -> str:
        """The token for this allele, exactly as it appears in a VCF file."""

    def __str__(self):
        return self.to_vcf_string()


@dataclass(frozen=True)
class VcfBasesAllele(VcfAllele):
    bases: str

    def __post_init__(self):
        if not BASES_PATTERN.fullmatch(self.bases or ""):
            raise ValidationException(f"Bases must only contain A, C, G, T or N: {repr(self.bases)}")

    def __len__(self):
        return len(self.bases)

    def to_vcf_string(self) -> str:
        return self.bases

    @property
    def is_ambiguous(self) -> bool:
        return "N" in self.bases.upper()

    def to_seq(self) -> Seq:
        return Seq(self.bases)


@dataclass(frozen=True)
class VcfMissingAllele(VcfAllele):
    def to_vcf_string(self) -> str:
        return MISSING_VALUE


@dataclass(frozen=True)
class VcfDeletionAllele(VcfAllele):
    """The ``*`` allele: this position is deleted by a variant that starts upstream of it."""

    def to_vcf_string(self) -> str:
        return DELETION_TOKEN


@dataclass(frozen=True)
class VcfSymbolicAllele(VcfAllele):
    """A symbolic allele, ``<id>``. Colon-separated IDs describe subtypes, e.g. ``DUP:TANDEM``."""

    id: str

    def __post_init__(self):
        if not self.id or "<" in self.id or ">" in self.id:
            raise ValidationException(f"Invalid symbolic allele ID: {repr(self.id)}")

    def to_vcf_string(self) -> str:
        return f"<{self.id}>"

    @property
    def sv_code(self) -> ReservedStructuralVariantCode:
        """The reserved structural variant code of the top-level ID, or ``UNKNOWN`` if it is not reserved."""
        return ReservedStructuralVariantCode.from_value(self.id.split(":")[0])

    @property
    def sv_subtypes(self) -> Tuple[str, ...]:
        return tuple(self.id.split(":")[1:])

    @property
    def is_reserved(self) -> bool:
        return self.sv_code != ReservedStructuralVariantCode.UNKNOWN


@dataclass(frozen=True)
class VcfInsertionAllele(VcfAllele):
    """Bases joined to an assembled contig declared elsewhere, e.g. ``C<ctg1>`` or ``<ctg1>C``."""

    bases: str
    contig_id: str
    bases_first: bool = True

    def __post_init__(self):
        if not BASES_PATTERN.fullmatch(self.bases or ""):
            raise ValidationException(f"Insertion bases must only contain A, C, G, T or N: {repr(self.bases)}")
        if not self.contig_id or "<" in self.contig_id or ">" in self.contig_id:
            raise ValidationException(f"Invalid insertion contig ID: {repr(self.contig_id)}")

    def to_vcf_string(self) -> str:
        if self.bases_first:
            return f"{self.bases}<{self.contig_id}>"
        return f"<{self.contig_id}>{self.bases}"


@dataclass(frozen=True)
class VcfBreakendAllele(VcfAllele):
    """
    A breakend. ``mate`` is where the joined sequence continues; ``bases_first`` records whether the local bases
    precede the mate in the token. Single breakends have no mate and no orientation.
    """

    bases: str
    mate: Optional[Locus] = None
    orientation: Optional[BreakendOrientation] = None
    bases_first: bool = True

    def __post_init__(self):
        # a mated breakend may carry no local bases, e.g. ]13:123456]
        if (self.bases or self.mate is None) and not BASES_PATTERN.fullmatch(self.bases or ""):
            raise ValidationException(f"Breakend bases must only contain A, C, G, T or N: {repr(self.bases)}")
        if (self.mate is None) != (self.orientation is None):
            raise ValidationException("A breakend must have both a mate and an orientation, or neither")

    @property
    def is_single(self) -> bool:
        return self.mate is None

    def to_vcf_string(self) -> str:
        if self.is_single:
            if self.bases_first:
                return f"{self.bases}{SINGLE_BREAKEND_TOKEN}"
            return f"{SINGLE_BREAKEND_TOKEN}{self.bases}"
        bracket = self.orientation.value
        mate = f"{bracket}{self.mate.chromosome}:{self.mate.position}{bracket}"
        if self.bases_first:
            return f"{self.bases}{mate}"
        return f"{mate}{self.bases}"


def _parse_breakend(token: str) -> VcfBreakendAllele:
    match = BREAKEND_PATTERN.fullmatch(token)
    if not match:
        raise AlleleSyntaxError(token)
    prefix, bracket, mate, suffix = match.groups()
    if prefix and suffix:
        raise AlleleSyntaxError(token)
    chromosome, _, position = mate.rpartition(":")
    # mate positions are plain decimal without leading zeros
    if not chromosome or not MATE_POSITION_PATTERN.fullmatch(position):
        raise AlleleSyntaxError(token)
    try:
        locus = Locus(chromosome, int(position))
    except ValidationException as e:
        raise AlleleSyntaxError(token) from e
    return VcfBreakendAllele(
        bases=prefix or suffix,
        mate=locus,
        orientation=BreakendOrientation(bracket),
        bases_first=bool(prefix) or not suffix,
    )


def parse_allele(token: str) -> VcfAllele:
    """
    Parse a single REF or ALT token.

    Args:
        token: One allele, without surrounding separators.

    Returns:
        The :class:`VcfAllele` form matching ``token``.

    Raises:
        AlleleSyntaxError: if the token matches none of the allele forms.
    """
    if token == MISSING_VALUE:
        return VcfMissingAllele()
    if token == DELETION_TOKEN:
        return VcfDeletionAllele()
    match = SYMBOLIC_PATTERN.fullmatch(token)
    if match:
        return VcfSymbolicAllele(match.group(1))
    if "[" in token or "]" in token:
        return _parse_breakend(token)
    if BASES_PATTERN.fullmatch(token):
        return VcfBasesAllele(token)
    match = INSERTION_PATTERN.fullmatch(token)
    if match:
        bases_first, contig_first, contig_second, bases_second = match.groups()
        if bases_first:
            return VcfInsertionAllele(bases_first, contig_first, bases_first=True)
        return VcfInsertionAllele(bases_second, contig_second, bases_first=False)
    match = SINGLE_BREAKEND_PATTERN.fullmatch(token)
    if match:
        leading_dot_bases, trailing_dot_bases = match.groups()
        if leading_dot_bases:
            return VcfBreakendAllele(leading_dot_bases, bases_first=False)
        return VcfBreakendAllele(trailing_dot_bases, bases_first=True)
    raise AlleleSyntaxError(token)
