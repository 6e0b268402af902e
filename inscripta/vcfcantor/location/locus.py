"""
Single-base genomic coordinates and the closed ranges between them.

Positions are 1-based, matching the VCF ``POS`` column. A :class:`Locus` accepts any integer position, including
zero and negative values, because VCF files in the wild use them (e.g. ``-1`` for telomeric records) and a parsed
record must be able to reproduce its input. Ordering constraints are enforced only when two loci are combined into a
:class:`LocusRange`.
"""
from dataclasses import dataclass

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.location.strand import Strand
from inscripta.vcfcantor.util.object_validation import ObjectValidation


@dataclass(frozen=True)
class Locus:
    """A position on a named contig."""

    chromosome: str
    position: int
    strand: Strand = Strand.PLUS

    def __post_init__(self):
        ObjectValidation.require_text_without_whitespace(self.chromosome, "Chromosome")
        if isinstance(self.position, bool) or not isinstance(self.position, int):
            raise ValidationException(f"Position must be an integer, got {repr(self.position)}")

    def __str__(self):
        return f"{self.chromosome}:{self.position}"

    def shift(self, offset: int) -> "Locus":
        return Locus(self.chromosome, self.position + offset, self.strand)


@dataclass(frozen=True)
class LocusRange:
    """
    A closed range of positions between two loci on the same contig and strand.

    Raises:
        ValidationException: if the loci are on different contigs or strands.
        InvalidPositionException: if ``end`` comes before ``start``.
    """

    start: Locus
    end: Locus

    def __post_init__(self):
        if self.start.chromosome != self.end.chromosome:
            raise ValidationException(
                f"Start {self.start} and end {self.end} must be on the same chromosome to form a range"
            )
        if self.start.strand != self.end.strand:
            raise ValidationException(f"Start strand {self.start.strand} does not match end strand {self.end.strand}")
        ObjectValidation.require_span_ordered(self.start.position, self.end.position)

    def __str__(self):
        return f"{self.start.chromosome}:{self.start.position}-{self.end.position}"

    def __len__(self):
        return self.end.position - self.start.position + 1

    @property
    def chromosome(self) -> str:
        return self.start.chromosome

    def contains(self, locus: Locus) -> bool:
        return (
            locus.chromosome == self.chromosome
            and locus.strand == self.start.strand
            and self.start.position <= locus.position <= self.end.position
        )
