"""
Data models. These models act as a JSON schema for serializing and deserializing VCF headers and positions.

Values are stored as VCF text, so a position that goes through a model and back writes the same line it was read
from.
"""
from typing import ClassVar, Dict, List, Optional, Type

from marshmallow import Schema  # noqa: F401
from marshmallow_dataclass import dataclass

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.exc import InvalidInputError
from inscripta.vcfcantor.io.vcf.collection import VcfMetadataCollection
from inscripta.vcfcantor.io.vcf.exc import VcfParserError
from inscripta.vcfcantor.io.vcf.parser import VcfMetadataParser
from inscripta.vcfcantor.io.vcf.position import VcfPosition
from inscripta.vcfcantor.io.vcf.values import format_float


@dataclass
class BaseModel:
    """Base for all of the models."""

    Schema: ClassVar[Type[Schema]] = Schema  # noqa: F811

    class Meta:
        ordered = True


@dataclass
class VcfPositionModel(BaseModel):
    """Data model that allows construction of a :class:`~inscripta.vcfcantor.io.vcf.position.VcfPosition` object."""

    chromosome: str
    position: int
    ref: str
    alts: Optional[List[str]] = None
    ids: Optional[List[str]] = None
    quality: Optional[str] = None
    filters: Optional[List[str]] = None
    info: Optional[Dict[str, Optional[str]]] = None
    format: Optional[List[str]] = None
    samples: Optional[List[Dict[str, Optional[str]]]] = None

    @staticmethod
    def from_position(position: VcfPosition) -> "VcfPositionModel":
        return VcfPositionModel(
            chromosome=position.chromosome,
            position=position.position,
            ref=position.ref.to_vcf_string(),
            alts=[a.to_vcf_string() for a in position.alts],
            ids=list(position.ids),
            quality=None if position.quality is None else format_float(position.quality),
            filters=list(position.filters),
            info=position.info.to_dict(),
            format=None if position.format is None else list(position.format),
            samples=[sample.to_dict() for sample in position.samples],
        )

    def to_position(self) -> VcfPosition:
        try:
            return VcfPosition(
                chromosome=self.chromosome,
                position=self.position,
                ref=self.ref,
                alts=self.alts or (),
                ids=self.ids or (),
                quality=self.quality,
                filters=self.filters or (),
                info=self.info,
                format=self.format,
                samples=self.samples or (),
            )
        except (VcfParserError, ValidationException) as e:
            raise InvalidInputError(f"Cannot construct a position from {self}: {e}") from e


@dataclass
class VcfMetadataCollectionModel(BaseModel):
    """
    Data model that allows construction of a :class:`~inscripta.vcfcantor.io.vcf.collection.VcfMetadataCollection`
    object. ``lines`` holds every header line, ending with the ``#CHROM`` line.
    """

    lines: List[str]

    @staticmethod
    def from_collection(collection: VcfMetadataCollection) -> "VcfMetadataCollectionModel":
        return VcfMetadataCollectionModel(lines=collection.to_vcf_lines())

    def to_collection(self) -> VcfMetadataCollection:
        parser = VcfMetadataParser()
        collection = parser.parse(self.lines)
        if parser.lines_processed != len(self.lines):
            raise InvalidInputError("Header model lines must all start with #")
        return collection
