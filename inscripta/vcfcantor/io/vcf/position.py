"""
Data records (one per data line).
"""
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from methodtools import lru_cache

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.vcf.alleles import VcfAllele, VcfBasesAllele, parse_allele
from inscripta.vcfcantor.io.vcf.constants import FILTER_SEPARATOR, ID_SEPARATOR, PASS_FILTER
from inscripta.vcfcantor.io.vcf.genotype import Genotype
from inscripta.vcfcantor.io.vcf.properties import ReservedInfoProperty, VcfInfo, VcfSample
from inscripta.vcfcantor.io.vcf.values import format_float, parse_float
from inscripta.vcfcantor.location import Locus, LocusRange
from inscripta.vcfcantor.util.object_validation import ObjectValidation


def _text_fields(values: Iterable[str], separator: str, description: str) -> Tuple[str, ...]:
    values = tuple(values)
    for value in values:
        if separator in value or any(c.isspace() for c in value):
            raise ValidationException(f"{description} {repr(value)} contains a separator or whitespace")
    return values


class VcfPosition:
    """
    One VCF data record.

    Records are immutable and fully validated on construction. String arguments are accepted for convenience and
    parsed with the same functions the data line parser uses, so ``VcfPosition("chr1", 5, "A", ["T"])`` is
    equivalent to parsing the corresponding line.

    Args:
        chromosome: The CHROM column.
        position: The 1-based POS column. Any integer is accepted, including negative values.
        ref: The REF allele.
        alts: ALT alleles in file order; duplicates are kept.
        ids: The ID column split on ``;``. Empty for ``.``.
        quality: The QUAL column, ``None`` for ``.``.
        filters: The FILTER column split on ``;``. Empty for ``.``.
        info: The INFO column.
        format: The FORMAT keys, or ``None`` when the line has no FORMAT column. A present FORMAT is never empty.
        samples: Sample columns in header order.

    Raises:
        ValidationException: if any field is malformed, FORMAT is empty, the FORMAT keys repeat, or a sample uses a
            key that FORMAT does not declare.
    """

    def __init__(
        self,
        chromosome: str,
        position: int,
        ref: Union[VcfAllele, str],
        alts: Iterable[Union[VcfAllele, str]] = (),
        ids: Iterable[str] = (),
        quality: Optional[Union[float, str]] = None,
        filters: Iterable[str] = (),
        info: Optional[Union[VcfInfo, Mapping[str, Optional[str]]]] = None,
        format: Optional[Iterable[str]] = None,
        samples: Iterable[Union[VcfSample, Mapping[str, Optional[str]]]] = (),
    ):
        self.locus = Locus(chromosome, position)
        self.ref = ref if isinstance(ref, VcfAllele) else parse_allele(ref)
        self.alts: Tuple[VcfAllele, ...] = tuple(a if isinstance(a, VcfAllele) else parse_allele(a) for a in alts)
        self.ids = _text_fields(ids, ID_SEPARATOR, "ID")
        if isinstance(quality, str):
            quality = parse_float(quality, "Quality")
        self.quality: Optional[float] = quality
        self.filters = _text_fields(filters, FILTER_SEPARATOR, "Filter")
        self.info = info if isinstance(info, VcfInfo) else VcfInfo(info or ())
        self.format: Optional[Tuple[str, ...]] = None if format is None else tuple(format)
        self.samples: Tuple[VcfSample, ...] = tuple(s if isinstance(s, VcfSample) else VcfSample(s) for s in samples)

        if self.format is not None:
            if not self.format:
                raise ValidationException("FORMAT must declare at least one key")
            ObjectValidation.require_unique(self.format, "FORMAT key")
        elif self.samples:
            raise ValidationException("Samples require a FORMAT column")
        declared = set(self.format or ())
        for i, sample in enumerate(self.samples):
            undeclared = [key for key in sample if key not in declared]
            if undeclared:
                raise ValidationException(f"Sample {i} has keys not present in FORMAT: {', '.join(undeclared)}")

    def _key(self) -> Tuple[Any, ...]:
        quality = None if self.quality is None else format_float(self.quality)
        return (
            self.locus,
            self.ref,
            self.alts,
            self.ids,
            quality,
            self.filters,
            self.info,
            self.format,
            self.samples,
        )

    def __eq__(self, other):
        if not isinstance(other, VcfPosition):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"VcfPosition({self.to_vcf_line()!r})"

    def __str__(self):
        return self.to_vcf_line()

    @property
    def chromosome(self) -> str:
        return self.locus.chromosome

    @property
    def position(self) -> int:
        return self.locus.position

    @property
    def all_alleles(self) -> Tuple[VcfAllele, ...]:
        """REF followed by every ALT; a genotype index is a position in this tuple."""
        return (self.ref,) + self.alts

    @property
    def is_passing(self) -> bool:
        return self.filters == (PASS_FILTER,)

    @property
    def is_filtered(self) -> bool:
        return bool(self.filters) and not self.is_passing

    @lru_cache(maxsize=1)
    def genotypes(self) -> Tuple[Optional[Genotype], ...]:
        """The decoded ``GT`` value of every sample, ``None`` where a sample has none."""
        return tuple(sample.genotype for sample in self.samples)

    def genotype(self, sample_index: int) -> Optional[Genotype]:
        return self.genotypes()[sample_index]

    @property
    def reference_range(self) -> LocusRange:
        """
        The reference positions this record covers: through INFO ``END`` when present, otherwise through the last
        base of REF.

        Raises:
            InvalidPositionException: if the end comes before POS.
        """
        end = self.info.get_reserved(ReservedInfoProperty.END)
        if end is None:
            length = len(self.ref) if isinstance(self.ref, VcfBasesAllele) else 1
            end = self.position + length - 1
        return LocusRange(self.locus, Locus(self.chromosome, end))

    def replace(self, **changes) -> "VcfPosition":
        """A new record with some fields replaced, e.g. ``position.replace(filters=["PASS"])``."""
        fields = dict(
            chromosome=self.chromosome,
            position=self.position,
            ref=self.ref,
            alts=self.alts,
            ids=self.ids,
            quality=self.quality,
            filters=self.filters,
            info=self.info,
            format=self.format,
            samples=self.samples,
        )
        unknown = set(changes) - set(fields)
        if unknown:
            raise TypeError(f"Unknown VcfPosition field(s): {', '.join(sorted(unknown))}")
        fields.update(changes)
        return VcfPosition(**fields)

    def to_vcf_line(self) -> str:
        # avoid circular imports
        from inscripta.vcfcantor.io.vcf.writer import position_to_vcf

        return position_to_vcf(self)
