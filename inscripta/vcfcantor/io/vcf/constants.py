from enum import Enum

from inscripta.vcfcantor.util.enum import HasMemberMixin

MISSING_VALUE = "."
PASS_FILTER = "PASS"

COLUMN_SEPARATOR = "\t"
ALT_SEPARATOR = ","
ID_SEPARATOR = ";"
FILTER_SEPARATOR = ";"
INFO_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "="
FORMAT_SEPARATOR = ":"
LIST_SEPARATOR = ","
METADATA_TAG_SEPARATOR = ","
QUOTE = '"'

METADATA_PREFIX = "##"
HEADER_PREFIX = "#"
FILE_FORMAT_KEY = "fileformat"
VERSION_PREFIX = "VCFv"
# versions this package has been checked against; others parse with a warning
KNOWN_VERSIONS = ("4.0", "4.1", "4.2", "4.3", "4.4")

DEFAULT_LOG_EVERY = 10000


class VcfColumn(Enum):
    CHROM = "CHROM"
    POS = "POS"
    ID = "ID"
    REF = "REF"
    ALT = "ALT"
    QUAL = "QUAL"
    FILTER = "FILTER"
    INFO = "INFO"
    FORMAT = "FORMAT"


FIXED_COLUMNS = tuple(c.value for c in VcfColumn if c != VcfColumn.FORMAT)
COLUMN_HEADER_PREFIX = HEADER_PREFIX + VcfColumn.CHROM.value


class VcfMetadataType(HasMemberMixin):
    """Keys of structured ``##KEY=<...>`` metadata lines. Note that ``contig`` is lowercase in the format."""

    INFO = "INFO"
    FORMAT = "FORMAT"
    FILTER = "FILTER"
    ALT = "ALT"
    CONTIG = "contig"
    PEDIGREE = "PEDIGREE"
    SAMPLE = "SAMPLE"


class MetadataTag(HasMemberMixin):
    ID = "ID"
    NUMBER = "Number"
    TYPE = "Type"
    DESCRIPTION = "Description"
    SOURCE = "Source"
    VERSION = "Version"
    LENGTH = "length"
    ASSEMBLY = "assembly"
    MD5 = "md5"
    SPECIES = "species"
    TAXONOMY = "taxonomy"
    URL = "URL"


REQUIRED_METADATA_TAGS = {
    VcfMetadataType.INFO: (MetadataTag.ID, MetadataTag.NUMBER, MetadataTag.TYPE, MetadataTag.DESCRIPTION),
    VcfMetadataType.FORMAT: (MetadataTag.ID, MetadataTag.NUMBER, MetadataTag.TYPE, MetadataTag.DESCRIPTION),
    VcfMetadataType.FILTER: (MetadataTag.ID, MetadataTag.DESCRIPTION),
    VcfMetadataType.ALT: (MetadataTag.ID, MetadataTag.DESCRIPTION),
    VcfMetadataType.CONTIG: (MetadataTag.ID,),
    VcfMetadataType.PEDIGREE: (MetadataTag.ID,),
    VcfMetadataType.SAMPLE: (MetadataTag.ID,),
}

# sub-tags that are recognized beyond the required ones; anything else is kept but warned about.
# PEDIGREE and SAMPLE lines are free-form, so they are never warned about.
OPTIONAL_METADATA_TAGS = {
    VcfMetadataType.INFO: (MetadataTag.SOURCE, MetadataTag.VERSION),
    VcfMetadataType.FORMAT: (),
    VcfMetadataType.FILTER: (),
    VcfMetadataType.ALT: (),
    VcfMetadataType.CONTIG: (
        MetadataTag.LENGTH,
        MetadataTag.ASSEMBLY,
        MetadataTag.MD5,
        MetadataTag.SPECIES,
        MetadataTag.TAXONOMY,
        MetadataTag.URL,
    ),
}

# sub-tags that are written quoted when a line is built programmatically
QUOTED_METADATA_TAGS = (MetadataTag.DESCRIPTION.value, MetadataTag.SOURCE.value, MetadataTag.VERSION.value)


class VcfValueType(HasMemberMixin):
    """The ``Type=`` vocabulary of INFO and FORMAT lines."""

    INTEGER = "Integer"
    FLOAT = "Float"
    FLAG = "Flag"
    CHARACTER = "Character"
    STRING = "String"
    UNKNOWN = "Unknown"


class VcfNumberFlag(HasMemberMixin):
    """Non-numeric values of the ``Number=`` sub-tag."""

    PER_ALT_ALLELE = "A"
    PER_ALLELE = "R"
    PER_GENOTYPE = "G"
    UNBOUNDED = "."
    UNKNOWN = "Unknown"


class ReservedStructuralVariantCode(HasMemberMixin):
    """Top-level (and documented sub-typed) IDs of symbolic structural variant alleles."""

    DEL = "DEL"
    INS = "INS"
    DUP = "DUP"
    INV = "INV"
    CNV = "CNV"
    DUP_TANDEM = "DUP:TANDEM"
    DEL_ME = "DEL:ME"
    INS_ME = "INS:ME"
    UNKNOWN = "Unknown"
