"""
INFO and per-sample FORMAT values.

Both are stored as ordered maps of raw text, so writing a parsed record reproduces it exactly. Typed access goes
through a lookup table from key to a :class:`PropertyCodec`: reserved keys decode to their documented type, and
any other key passes through as a string unless a header line describes it.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.vcf.constants import (
    FILTER_SEPARATOR,
    FORMAT_SEPARATOR,
    INFO_SEPARATOR,
    KEY_VALUE_SEPARATOR,
    MISSING_VALUE,
    VcfValueType,
)
from inscripta.vcfcantor.io.vcf.genotype import Genotype, genotype_likelihood_ordering
from inscripta.vcfcantor.io.vcf.values import decode_list, decode_value, encode_list, encode_value
from inscripta.vcfcantor.util.enum import HasMemberMixin

if TYPE_CHECKING:
    from inscripta.vcfcantor.io.vcf.metadata import StructuredMetadata


class ReservedFormatProperty(HasMemberMixin):
    GENOTYPE = "GT"
    DEPTH = "DP"
    FILTER = "FT"
    GENOTYPE_LIKELIHOODS = "GL"
    GENOTYPE_LIKELIHOODS_HETEROZYGOUS = "GLE"
    PHRED_LIKELIHOODS = "PL"
    GENOTYPE_POSTERIOR_PROBABILITIES = "GP"
    GENOTYPE_QUALITY = "GQ"
    HAPLOTYPE_QUALITIES = "HQ"
    PHASE_SET = "PS"
    PHASING_QUALITY = "PQ"
    EXPECTED_ALT_COUNTS = "EC"
    MAPPING_QUALITY = "MQ"
    ALLELE_DEPTH = "AD"
    ALLELE_DEPTH_FORWARD = "ADF"
    ALLELE_DEPTH_REVERSE = "ADR"


class ReservedInfoProperty(HasMemberMixin):
    ANCESTRAL_ALLELE = "AA"
    ALLELE_COUNT = "AC"
    ALLELE_DEPTH = "AD"
    ALLELE_DEPTH_FORWARD = "ADF"
    ALLELE_DEPTH_REVERSE = "ADR"
    ALLELE_FREQUENCY = "AF"
    ALLELE_NUMBER = "AN"
    BASE_QUALITY = "BQ"
    CIGAR = "CIGAR"
    DBSNP = "DB"
    DEPTH = "DP"
    END = "END"
    HAPMAP2 = "H2"
    HAPMAP3 = "H3"
    MAPPING_QUALITY = "MQ"
    MAPPING_QUALITY_ZERO_COUNT = "MQ0"
    SAMPLES_WITH_DATA = "NS"
    STRAND_BIAS = "SB"
    SOMATIC = "SOMATIC"
    VALIDATED = "VALIDATED"
    THOUSAND_GENOMES = "1000G"


@dataclass(frozen=True)
class PropertyCodec:
    """Decode and encode functions for the values of one key."""

    value_type: VcfValueType = VcfValueType.STRING
    is_list: bool = False
    decoder: Optional[Callable[[str], Any]] = None
    encoder: Optional[Callable[[Any], str]] = None

    def decode(self, raw: Optional[str]) -> Any:
        if self.decoder is not None:
            return None if raw is None else self.decoder(raw)
        if self.is_list:
            return decode_list(raw, self.value_type)
        return decode_value(raw, self.value_type)

    def encode(self, value: Any) -> Optional[str]:
        if self.encoder is not None:
            return self.encoder(value)
        if self.value_type == VcfValueType.FLAG:
            return None
        if self.is_list:
            return encode_list(value)
        return encode_value(value)


def _decode_filters(raw: str) -> Optional[List[str]]:
    return None if raw == MISSING_VALUE else raw.split(FILTER_SEPARATOR)


def _encode_filters(value: Optional[List[str]]) -> str:
    return MISSING_VALUE if not value else FILTER_SEPARATOR.join(value)


def _passthrough(value: str) -> str:
    return value


GENERIC_CODEC = PropertyCodec(decoder=_passthrough, encoder=_passthrough)
_INTEGER = PropertyCodec(VcfValueType.INTEGER)
_INTEGER_LIST = PropertyCodec(VcfValueType.INTEGER, is_list=True)
_FLOAT = PropertyCodec(VcfValueType.FLOAT)
_FLOAT_LIST = PropertyCodec(VcfValueType.FLOAT, is_list=True)
_STRING_LIST = PropertyCodec(VcfValueType.STRING, is_list=True)
_FLAG = PropertyCodec(VcfValueType.FLAG)

FORMAT_PROPERTY_CODECS: Dict[ReservedFormatProperty, PropertyCodec] = {
    ReservedFormatProperty.GENOTYPE: PropertyCodec(decoder=Genotype.from_string, encoder=str),
    ReservedFormatProperty.DEPTH: _INTEGER,
    ReservedFormatProperty.FILTER: PropertyCodec(decoder=_decode_filters, encoder=_encode_filters),
    ReservedFormatProperty.GENOTYPE_LIKELIHOODS: _FLOAT_LIST,
    ReservedFormatProperty.GENOTYPE_LIKELIHOODS_HETEROZYGOUS: GENERIC_CODEC,
    ReservedFormatProperty.PHRED_LIKELIHOODS: _INTEGER_LIST,
    ReservedFormatProperty.GENOTYPE_POSTERIOR_PROBABILITIES: _FLOAT_LIST,
    ReservedFormatProperty.GENOTYPE_QUALITY: _INTEGER,
    ReservedFormatProperty.HAPLOTYPE_QUALITIES: _INTEGER_LIST,
    ReservedFormatProperty.PHASE_SET: _INTEGER,
    ReservedFormatProperty.PHASING_QUALITY: _INTEGER,
    ReservedFormatProperty.EXPECTED_ALT_COUNTS: _INTEGER_LIST,
    ReservedFormatProperty.MAPPING_QUALITY: _INTEGER,
    ReservedFormatProperty.ALLELE_DEPTH: _INTEGER_LIST,
    ReservedFormatProperty.ALLELE_DEPTH_FORWARD: _INTEGER_LIST,
    ReservedFormatProperty.ALLELE_DEPTH_REVERSE: _INTEGER_LIST,
}

INFO_PROPERTY_CODECS: Dict[ReservedInfoProperty, PropertyCodec] = {
    ReservedInfoProperty.ANCESTRAL_ALLELE: GENERIC_CODEC,
    ReservedInfoProperty.ALLELE_COUNT: _INTEGER_LIST,
    ReservedInfoProperty.ALLELE_DEPTH: _INTEGER_LIST,
    ReservedInfoProperty.ALLELE_DEPTH_FORWARD: _INTEGER_LIST,
    ReservedInfoProperty.ALLELE_DEPTH_REVERSE: _INTEGER_LIST,
    ReservedInfoProperty.ALLELE_FREQUENCY: _FLOAT_LIST,
    ReservedInfoProperty.ALLELE_NUMBER: _INTEGER,
    ReservedInfoProperty.BASE_QUALITY: _FLOAT,
    ReservedInfoProperty.CIGAR: _STRING_LIST,
    ReservedInfoProperty.DBSNP: _FLAG,
    ReservedInfoProperty.DEPTH: _INTEGER,
    ReservedInfoProperty.END: _INTEGER,
    ReservedInfoProperty.HAPMAP2: _FLAG,
    ReservedInfoProperty.HAPMAP3: _FLAG,
    ReservedInfoProperty.MAPPING_QUALITY: _FLOAT,
    ReservedInfoProperty.MAPPING_QUALITY_ZERO_COUNT: _INTEGER,
    ReservedInfoProperty.SAMPLES_WITH_DATA: _INTEGER,
    ReservedInfoProperty.STRAND_BIAS: _INTEGER_LIST,
    ReservedInfoProperty.SOMATIC: _FLAG,
    ReservedInfoProperty.VALIDATED: _FLAG,
    ReservedInfoProperty.THOUSAND_GENOMES: _FLAG,
}


def format_property_codec(key: str) -> PropertyCodec:
    """Codec for a FORMAT key. Keys that are not reserved pass through unchanged."""
    if ReservedFormatProperty.has_value(key):
        return FORMAT_PROPERTY_CODECS[ReservedFormatProperty(key)]
    return GENERIC_CODEC


def info_property_codec(key: str) -> PropertyCodec:
    """Codec for an INFO key. Keys that are not reserved pass through unchanged."""
    if ReservedInfoProperty.has_value(key):
        return INFO_PROPERTY_CODECS[ReservedInfoProperty(key)]
    return GENERIC_CODEC


def metadata_codec(line: "StructuredMetadata") -> PropertyCodec:
    """Codec described by the ``Number`` and ``Type`` sub-tags of an INFO or FORMAT header line."""
    number = line.number
    return PropertyCodec(value_type=line.type, is_list=not (isinstance(number, int) and number <= 1))


class PropertyMap(Mapping[str, Optional[str]]):
    """
    An immutable, insertion-ordered map of raw text values. Two maps are equal only if they hold the same items in
    the same order.
    """

    forbidden_in_keys: Tuple[str, ...] = ("\t", "\n")
    forbidden_in_values: Tuple[str, ...] = ("\t", "\n")
    description = "Property"

    def __init__(self, items: Union[Mapping[str, Optional[str]], Iterable[Tuple[str, Optional[str]]]] = ()):
        if isinstance(items, Mapping):
            items = items.items()
        data = {}
        for key, value in items:
            if not key:
                raise ValidationException(f"{self.description} keys must be non-empty")
            if key in data:
                raise ValidationException(f"Duplicate {self.description} key: {key}")
            if any(c in key for c in self.forbidden_in_keys):
                raise ValidationException(f"{self.description} key {repr(key)} contains a reserved separator")
            if value is not None and any(c in value for c in self.forbidden_in_values):
                raise ValidationException(
                    f"{self.description} value {repr(value)} of {key} contains a reserved separator"
                )
            data[key] = value
        self._data = data

    def __getitem__(self, key: str) -> Optional[str]:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other):
        if not isinstance(other, PropertyMap):
            return NotImplemented
        return type(self) is type(other) and list(self._data.items()) == list(other._data.items())

    def __hash__(self):
        return hash((type(self).__name__, tuple(self._data.items())))

    def __repr__(self):
        return f"{type(self).__name__}({list(self._data.items())})"

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._data)


class VcfInfo(PropertyMap):
    """The INFO column. Flags are keys whose value is ``None``."""

    forbidden_in_keys = ("\t", "\n", INFO_SEPARATOR, KEY_VALUE_SEPARATOR)
    forbidden_in_values = ("\t", "\n", INFO_SEPARATOR)
    description = "INFO"

    def is_flag(self, key: str) -> bool:
        return key in self._data and self._data[key] is None

    def get_reserved(self, prop: ReservedInfoProperty) -> Any:
        """Decoded value of a reserved key, ``None`` if absent. Flags decode to ``True``."""
        if prop.value not in self._data:
            return None
        return INFO_PROPERTY_CODECS[prop].decode(self._data[prop.value])

    def get_converted(self, key: str, metadata: Optional["StructuredMetadata"] = None) -> Any:
        """Decoded value of any key, using its header line when one is given and the reserved table otherwise."""
        if key not in self._data:
            return None
        codec = metadata_codec(metadata) if metadata is not None else info_property_codec(key)
        return codec.decode(self._data[key])

    def to_vcf_string(self) -> str:
        if not self._data:
            return MISSING_VALUE
        return INFO_SEPARATOR.join(
            key if value is None else f"{key}{KEY_VALUE_SEPARATOR}{value}" for key, value in self._data.items()
        )


class VcfSample(PropertyMap):
    """
    The FORMAT values of one sample, keyed by FORMAT key. Trailing keys that a sample column omits are absent from
    the map; a ``None`` value is written as the missing value ``.``.
    """

    forbidden_in_keys = ("\t", "\n", FORMAT_SEPARATOR)
    forbidden_in_values = ("\t", "\n", FORMAT_SEPARATOR)
    description = "FORMAT"

    def get_reserved(self, prop: ReservedFormatProperty) -> Any:
        """Decoded value of a reserved key, ``None`` if absent."""
        raw = self._data.get(prop.value)
        if raw is None:
            return None
        return FORMAT_PROPERTY_CODECS[prop].decode(raw)

    def get_converted(self, key: str, metadata: Optional["StructuredMetadata"] = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        codec = metadata_codec(metadata) if metadata is not None else format_property_codec(key)
        return codec.decode(raw)

    @property
    def genotype(self) -> Optional[Genotype]:
        return self.get_reserved(ReservedFormatProperty.GENOTYPE)

    def genotype_likelihoods(self, allele_count: int) -> Optional[Dict[Tuple[int, ...], Optional[float]]]:
        """
        Map each possible genotype to its ``GL`` value. The ploidy comes from ``GT`` when present and is diploid
        otherwise.

        Raises:
            ValidationException: if the number of likelihoods does not match the number of possible genotypes.
        """
        likelihoods = self.get_reserved(ReservedFormatProperty.GENOTYPE_LIKELIHOODS)
        if likelihoods is None:
            return None
        genotype = self.genotype
        ploidy = genotype.ploidy if genotype is not None else 2
        ordering = genotype_likelihood_ordering(ploidy, allele_count)
        if len(ordering) != len(likelihoods):
            raise ValidationException(
                f"Expected {len(ordering)} genotype likelihoods for ploidy {ploidy} and {allele_count} alleles, "
                f"got {len(likelihoods)}"
            )
        return dict(zip(ordering, likelihoods))

    def to_vcf_string(self, format_keys: Iterable[str]) -> str:
        """Rebuild the sample column in FORMAT order, dropping absent trailing keys."""
        format_keys = list(format_keys)
        present = [i for i, key in enumerate(format_keys) if key in self._data]
        if not present:
            return MISSING_VALUE
        values = [self._data.get(key) for key in format_keys[: present[-1] + 1]]
        return FORMAT_SEPARATOR.join(MISSING_VALUE if v is None else v for v in values)
