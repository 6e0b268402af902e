"""
Genomic coordinates. A :class:`Locus` is a single position on a contig; a :class:`LocusRange` is a validated closed
span between two loci.
"""

from inscripta.vcfcantor.location.strand import Strand  # noqa: F401
from inscripta.vcfcantor.location.locus import Locus, LocusRange  # noqa: F401
