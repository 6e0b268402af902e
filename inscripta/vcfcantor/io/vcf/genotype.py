"""
Genotypes (the ``GT`` FORMAT value) and the allele ordering used by genotype likelihood fields.

Decoding is purely syntactic: a genotype may refer to any allele index. Indices are only checked against a position
when they are dereferenced with :meth:`Genotype.alleles`.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

from inscripta.vcfcantor.exc import AlleleIndexOutOfRangeError, ValidationException
from inscripta.vcfcantor.io.vcf.constants import MISSING_VALUE
from inscripta.vcfcantor.io.vcf.exc import VcfParserError

if TYPE_CHECKING:
    from inscripta.vcfcantor.io.vcf.alleles import VcfAllele
    from inscripta.vcfcantor.io.vcf.position import VcfPosition

PHASED = "|"
UNPHASED = "/"
GENOTYPE_PATTERN = re.compile(r"[/|]?(?:\.|\d+)(?:[/|](?:\.|\d+))*")
SEPARATOR_PATTERN = re.compile(r"([/|])")


@dataclass(frozen=True)
class Genotype:
    """
    An ordered list of allele indices (``None`` for a no-call) and the separator that follows each index but the
    last. ``leading_separator`` holds the optional explicit phasing prefix allowed since VCF 4.4, e.g. ``|0``.
    """

    indices: Tuple[Optional[int], ...]
    separators: Tuple[str, ...] = ()
    leading_separator: Optional[str] = None

    def __post_init__(self):
        if not self.indices:
            raise ValidationException("A genotype must have at least one allele")
        if len(self.separators) != len(self.indices) - 1:
            raise ValidationException(
                f"A genotype with {len(self.indices)} alleles needs {len(self.indices) - 1} separators, "
                f"got {len(self.separators)}"
            )
        for sep in self.separators + ((self.leading_separator,) if self.leading_separator else ()):
            if sep not in (PHASED, UNPHASED):
                raise ValidationException(f"Invalid genotype separator: {repr(sep)}")
        for index in self.indices:
            if index is not None and index < 0:
                raise ValidationException(f"Allele indices must be >= 0, got {index}")

    def __str__(self):
        return self.to_vcf_string()

    @staticmethod
    def from_string(text: str) -> "Genotype":
        """
        Decode a ``GT`` value such as ``0/1``, ``1|0``, ``./.``, ``1`` or ``0/1/2``.

        Raises:
            VcfParserError: if the text is not a genotype.
        """
        if not GENOTYPE_PATTERN.fullmatch(text):
            raise VcfParserError(f"Invalid genotype: {repr(text)}")
        tokens = SEPARATOR_PATTERN.split(text)
        leading_separator = None
        if tokens[0] == "":
            leading_separator = tokens[1]
            tokens = tokens[2:]
        indices = tuple(None if t == MISSING_VALUE else int(t) for t in tokens[0::2])
        return Genotype(indices, tuple(tokens[1::2]), leading_separator)

    @staticmethod
    def build(indices: List[Optional[int]], phased: bool = False) -> "Genotype":
        """Build a genotype that uses a single separator throughout."""
        sep = PHASED if phased else UNPHASED
        return Genotype(tuple(indices), tuple(sep for _ in indices[1:]))

    def to_vcf_string(self) -> str:
        parts = [self.leading_separator] if self.leading_separator else []
        for i, index in enumerate(self.indices):
            if i > 0:
                parts.append(self.separators[i - 1])
            parts.append(MISSING_VALUE if index is None else str(index))
        return "".join(parts)

    @property
    def ploidy(self) -> int:
        return len(self.indices)

    @property
    def is_phased(self) -> bool:
        return PHASED in self.separators or self.leading_separator == PHASED

    @property
    def is_no_call(self) -> bool:
        return all(index is None for index in self.indices)

    @property
    def is_homozygous(self) -> bool:
        return self.ploidy > 1 and None not in self.indices and len(set(self.indices)) == 1

    @property
    def is_heterozygous(self) -> bool:
        return len({index for index in self.indices if index is not None}) > 1

    def alleles(self, position: "VcfPosition") -> List[Optional["VcfAllele"]]:
        """
        Resolve each index against a position's alleles. No-calls resolve to ``None``.

        Raises:
            AlleleIndexOutOfRangeError: if an index is beyond the position's ALT alleles.
        """
        all_alleles = position.all_alleles
        resolved = []
        for index in self.indices:
            if index is None:
                resolved.append(None)
            elif index >= len(all_alleles):
                raise AlleleIndexOutOfRangeError(
                    f"Genotype {self} refers to allele {index} but {position.locus} has {len(all_alleles) - 1} "
                    "alternate allele(s)"
                )
            else:
                resolved.append(all_alleles[index])
        return resolved

    def to_simple_string(self, position: "VcfPosition") -> str:
        """The genotype with each index replaced by its allele, e.g. ``A|T``."""
        alleles = [MISSING_VALUE if a is None else a.to_vcf_string() for a in self.alleles(position)]
        parts = [self.leading_separator] if self.leading_separator else []
        for i, allele in enumerate(alleles):
            if i > 0:
                parts.append(self.separators[i - 1])
            parts.append(allele)
        return "".join(parts)

    def likelihood_index(self, allele_count: int) -> int:
        """Position of this genotype in the ``G``-ordered likelihood fields (GL, PL, GP)."""
        if None in self.indices:
            raise ValidationException(f"Genotype {self} has a no-call and has no likelihood index")
        key = tuple(sorted(self.indices))
        try:
            return genotype_likelihood_ordering(self.ploidy, allele_count).index(key)
        except ValueError:
            raise AlleleIndexOutOfRangeError(
                f"Genotype {self} refers to an allele beyond the {allele_count} allele(s) available"
            )


def genotype_likelihood_ordering(ploidy: int, allele_count: int) -> List[Tuple[int, ...]]:
    """
    Genotypes in the order used by ``Number=G`` fields. For a diploid with alleles 0..2 that is
    00, 01, 11, 02, 12, 22.

    Args:
        ploidy: Number of alleles per genotype.
        allele_count: Number of alleles at the position, including the reference.

    Returns:
        Sorted allele index tuples.
    """
    if ploidy < 1 or allele_count < 1:
        raise ValidationException("Ploidy and allele count must both be >= 1")

    def ordering(remaining: int, max_allele: int, suffix: Tuple[int, ...]):
        for allele in range(max_allele + 1):
            if remaining == 1:
                yield (allele,) + suffix
            else:
                yield from ordering(remaining - 1, allele, (allele,) + suffix)

    return list(ordering(ploidy, allele_count - 1, ()))
