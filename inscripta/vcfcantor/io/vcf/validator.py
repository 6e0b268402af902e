"""
Cross-checks between positions and the header they were read with.

The record model does not know about the header, so consistency between the two (declared IDs, sample counts) is
checked here, by the layer that holds both.
"""
import logging
from typing import Iterable, Iterator, List

from inscripta.vcfcantor.io.vcf.alleles import VcfSymbolicAllele
from inscripta.vcfcantor.io.vcf.collection import VcfMetadataCollection
from inscripta.vcfcantor.io.vcf.constants import MISSING_VALUE, PASS_FILTER
from inscripta.vcfcantor.io.vcf.exc import VcfValidationError
from inscripta.vcfcantor.io.vcf.position import VcfPosition

logger = logging.getLogger(__name__)


class VcfValidator:
    """
    Checks that positions only use FILTER, INFO, FORMAT and ALT IDs declared in the header, that they have one sample
    column per header sample, and that their contig is declared when the header declares any contigs.

    Args:
        metadata: The header positions are checked against.
        warn_only: Log problems as warnings instead of raising.
    """

    def __init__(self, metadata: VcfMetadataCollection, warn_only: bool = False):
        self.metadata = metadata
        self.warn_only = warn_only

    def problems(self, position: VcfPosition) -> List[str]:
        """Every inconsistency between ``position`` and the header, as messages."""
        found = []
        sample_count = len(self.metadata.sample_names)
        if len(position.samples) != sample_count:
            found.append(f"has {len(position.samples)} samples but the header declares {sample_count}")

        if self.metadata.contig and position.chromosome not in self.metadata.contig:
            found.append(f"is on undeclared contig {position.chromosome}")

        for name in position.filters:
            if name not in (PASS_FILTER, MISSING_VALUE) and name not in self.metadata.filter:
                found.append(f"uses undeclared FILTER {name}")

        for key in position.info:
            if key not in self.metadata.info:
                found.append(f"uses undeclared INFO {key}")

        for key in position.format or ():
            if key not in self.metadata.format:
                found.append(f"uses undeclared FORMAT {key}")

        for allele in position.alts:
            if isinstance(allele, VcfSymbolicAllele) and allele.id not in self.metadata.alt and not allele.is_reserved:
                found.append(f"uses undeclared ALT {allele.id}")
        return found

    def validate(self, position: VcfPosition) -> VcfPosition:
        """
        Raises:
            VcfValidationError: if ``position`` has problems and ``warn_only`` is not set.
        """
        found = self.problems(position)
        if found:
            if not self.warn_only:
                raise VcfValidationError(f"Position {position.locus} {'; '.join(found)}")
            for problem in found:
                logger.warning(f"Position {position.locus} {problem}")
        return position

    def validate_all(self, positions: Iterable[VcfPosition]) -> Iterator[VcfPosition]:
        """Validate lazily, passing positions through unchanged."""
        for position in positions:
            yield self.validate(position)
