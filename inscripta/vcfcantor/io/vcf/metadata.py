"""
Header (``##``) lines.

Each line parses into one member of the :data:`VcfMetadataLine` union:

* :class:`FileFormatMetadata` for ``##fileformat=VCFv<version>``.
* :class:`StructuredMetadata` for ``##KEY=<tag=value,...>`` where ``KEY`` is one of :class:`VcfMetadataType`. The
  kind is a field rather than a subclass, so every structured kind shares one tokenizer, one writer and one set of
  accessors; what differs per kind (required and known sub-tags) is looked up in tables.
* :class:`SimpleMetadata` for ``##key=value``.
* :class:`GenericMetadata` for everything else, including structured lines of kinds this package does not know.
  It stores the line verbatim so that nothing is lost.

Structured values are kept as they appear between the separators, with only the surrounding quotes removed, and the
set of quoted sub-tags is remembered. Writing a parsed line therefore reproduces it exactly, including escapes.
"""
import re
import warnings
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from inscripta.vcfcantor.io.vcf.constants import (
    FILE_FORMAT_KEY,
    KEY_VALUE_SEPARATOR,
    METADATA_PREFIX,
    METADATA_TAG_SEPARATOR,
    OPTIONAL_METADATA_TAGS,
    QUOTE,
    QUOTED_METADATA_TAGS,
    REQUIRED_METADATA_TAGS,
    VERSION_PREFIX,
    MetadataTag,
    VcfMetadataType,
    VcfNumberFlag,
    VcfValueType,
)
from inscripta.vcfcantor.io.vcf.exc import (
    MalformedMetadataLineError,
    MissingRequiredTagError,
    UnexpectedMetadataTagWarning,
    VersionMissingOrUnsupportedError,
)
from inscripta.vcfcantor.io.vcf.values import INTEGER_PATTERN
from inscripta.vcfcantor.util.object_validation import ObjectValidation

VERSION_PATTERN = re.compile(VERSION_PREFIX + r"(\d+(?:\.\d+)*)")
STRUCTURED_VALUE_PATTERN = re.compile(r"<(.*)>", re.S)
UNESCAPE_PATTERN = re.compile(r'\\(["\\])')
NEEDS_QUOTES = re.compile(r'[,"<>=\s]')


def unescape(value: str) -> str:
    return UNESCAPE_PATTERN.sub(r"\1", value)


def escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace(QUOTE, "\\" + QUOTE)


@dataclass(frozen=True)
class FileFormatMetadata:
    """The mandatory first line, ``##fileformat=VCFv<version>``."""

    version: str

    def to_vcf_line(self) -> str:
        return f"{METADATA_PREFIX}{FILE_FORMAT_KEY}={VERSION_PREFIX}{self.version}"


@dataclass(frozen=True)
class SimpleMetadata:
    """A ``##key=value`` line, such as ``##fileDate=20090805``."""

    key: str
    value: str

    def to_vcf_line(self) -> str:
        return f"{METADATA_PREFIX}{self.key}={self.value}"


@dataclass(frozen=True)
class GenericMetadata:
    """Any other header line, stored verbatim without its ``##`` prefix."""

    text: str

    def to_vcf_line(self) -> str:
        return f"{METADATA_PREFIX}{self.text}"


@dataclass(frozen=True)
class StructuredMetadata:
    """
    A ``##KEY=<tag=value,...>`` line. ``tags`` holds the sub-tags in file order with their raw values; sub-tags named
    in ``quoted`` were (or will be) written inside double quotes.

    Use :meth:`build` to create lines from unescaped values.

    Raises:
        MissingRequiredTagError: if a sub-tag required by ``kind`` is absent.
        MalformedMetadataLineError: if a sub-tag appears twice or a contig length is not a non-negative integer.
    """

    kind: VcfMetadataType
    tags: Tuple[Tuple[str, str], ...]
    quoted: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        seen = set()
        for key, _ in self.tags:
            if key in seen:
                raise MalformedMetadataLineError(f"{self.kind.value} line has sub-tag {key} more than once")
            seen.add(key)

        ObjectValidation.require_keys_present(
            seen,
            [tag.value for tag in REQUIRED_METADATA_TAGS[self.kind]],
            f"{self.kind.value} line",
            MissingRequiredTagError,
        )

        if self.kind in OPTIONAL_METADATA_TAGS:
            known = {tag.value for tag in REQUIRED_METADATA_TAGS[self.kind] + OPTIONAL_METADATA_TAGS[self.kind]}
            unexpected = [key for key in seen if key not in known]
            if unexpected:
                warnings.warn(
                    f"{self.kind.value} line {self.id} has unexpected sub-tag(s): {', '.join(sorted(unexpected))}",
                    UnexpectedMetadataTagWarning,
                )

        if self.kind == VcfMetadataType.CONTIG:
            length = self.get_raw(MetadataTag.LENGTH.value)
            if length is not None and (not INTEGER_PATTERN.fullmatch(length) or int(length) < 0):
                raise MalformedMetadataLineError(f"Contig {self.id} length must be an integer >= 0, got {length}")

    @staticmethod
    def build(
        kind: Union[VcfMetadataType, str],
        tags: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
    ) -> "StructuredMetadata":
        """
        Build a structured line from unescaped values. Free-text sub-tags (``Description``, ``Source``, ``Version``)
        and any value that would otherwise be ambiguous are quoted and escaped.

        Args:
            kind: The kind of line, as an enum member or its key (e.g. ``"INFO"``).
            tags: Sub-tags in the order they should be written.
        """
        if isinstance(tags, Mapping):
            tags = tags.items()
        raw_tags = []
        quoted = set()
        for key, value in tags:
            value = str(value)
            if key in QUOTED_METADATA_TAGS or NEEDS_QUOTES.search(value):
                quoted.add(key)
                value = escape(value)
            raw_tags.append((key, value))
        return StructuredMetadata(VcfMetadataType(kind), tuple(raw_tags), frozenset(quoted))

    def get_raw(self, tag: str) -> Optional[str]:
        for key, value in self.tags:
            if key == tag:
                return value
        return None

    def get(self, tag: str) -> Optional[str]:
        """The value of a sub-tag with escapes resolved, or ``None`` if it is absent."""
        value = self.get_raw(tag)
        if value is not None and tag in self.quoted:
            return unescape(value)
        return value

    def to_dict(self) -> Dict[str, str]:
        return {key: self.get(key) for key, _ in self.tags}

    @property
    def id(self) -> Optional[str]:
        return self.get(MetadataTag.ID.value)

    @property
    def description(self) -> Optional[str]:
        return self.get(MetadataTag.DESCRIPTION.value)

    @property
    def number(self) -> Optional[Union[int, VcfNumberFlag]]:
        """The ``Number`` sub-tag: a count, or one of the :class:`VcfNumberFlag` values."""
        value = self.get(MetadataTag.NUMBER.value)
        if value is None:
            return None
        if value.isdigit():
            return int(value)
        return VcfNumberFlag.from_value(value)

    @property
    def type(self) -> Optional[VcfValueType]:
        value = self.get(MetadataTag.TYPE.value)
        if value is None:
            return None
        return VcfValueType.from_value(value)

    @property
    def length(self) -> Optional[int]:
        value = self.get(MetadataTag.LENGTH.value)
        return None if value is None else int(value)

    def to_vcf_line(self) -> str:
        body = METADATA_TAG_SEPARATOR.join(
            f"{key}{KEY_VALUE_SEPARATOR}{QUOTE + value + QUOTE if key in self.quoted else value}"
            for key, value in self.tags
        )
        return f"{METADATA_PREFIX}{self.kind.value}=<{body}>"


VcfMetadataLine = Union[FileFormatMetadata, StructuredMetadata, SimpleMetadata, GenericMetadata]


def split_structured_value(body: str) -> List[Tuple[str, str, bool]]:
    """
    Split the text between ``<`` and ``>`` into ``(key, raw value, quoted)`` triples.

    Commas and equals signs inside double quotes are literal, and a backslash escapes the next character inside
    quotes.

    Raises:
        MalformedMetadataLineError: if quotes are unbalanced or an entry is not ``key=value``.
    """
    entries = []
    current = []
    in_quotes = False
    escaped = False
    for char in body:
        if escaped:
            escaped = False
        elif in_quotes and char == "\\":
            escaped = True
        elif char == QUOTE:
            in_quotes = not in_quotes
        elif char == METADATA_TAG_SEPARATOR and not in_quotes:
            entries.append("".join(current))
            current = []
            continue
        current.append(char)
    if in_quotes or escaped:
        raise MalformedMetadataLineError(f"Unbalanced quotes in structured value <{body}>")
    entries.append("".join(current))

    parsed = []
    for entry in entries:
        key, sep, value = entry.partition(KEY_VALUE_SEPARATOR)
        if not sep or not key or QUOTE in key:
            raise MalformedMetadataLineError(f"Structured value entry {repr(entry)} is not of the form key=value")
        if len(value) >= 2 and value.startswith(QUOTE) and value.endswith(QUOTE):
            parsed.append((key, value[1:-1], True))
        else:
            parsed.append((key, value, False))
    return parsed


def parse_version(value: str) -> str:
    """
    Extract the version from the value of a ``fileformat`` line, e.g. ``VCFv4.2`` gives ``4.2``.

    Raises:
        VersionMissingOrUnsupportedError: if the value is not ``VCFv`` followed by a dotted version number.
    """
    match = VERSION_PATTERN.fullmatch(value)
    if not match:
        raise VersionMissingOrUnsupportedError(f"{repr(value)} is not a VCF file format version")
    return match.group(1)


def parse_metadata_line(line: str) -> VcfMetadataLine:
    """
    Parse one ``##`` header line.

    Args:
        line: The line, without its trailing newline.

    Returns:
        The typed line. Lines of unknown shape become :class:`GenericMetadata`.

    Raises:
        MalformedMetadataLineError: if the line does not start with ``##`` or a known structured kind cannot be
            parsed.
        MissingRequiredTagError: if a known structured kind lacks a required sub-tag.
        VersionMissingOrUnsupportedError: if a ``fileformat`` line does not hold a VCF version.
    """
    if not line.startswith(METADATA_PREFIX):
        raise MalformedMetadataLineError(f"Metadata lines must start with {METADATA_PREFIX}")
    text = line[len(METADATA_PREFIX) :]
    key, sep, value = text.partition(KEY_VALUE_SEPARATOR)
    if not sep or not key:
        return GenericMetadata(text)

    if key == FILE_FORMAT_KEY:
        return FileFormatMetadata(parse_version(value))

    if VcfMetadataType.has_value(key):
        match = STRUCTURED_VALUE_PATTERN.fullmatch(value)
        if not match:
            raise MalformedMetadataLineError(f"{key} lines must have the form ##{key}=<tag=value,...>")
        entries = split_structured_value(match.group(1))
        return StructuredMetadata(
            kind=VcfMetadataType(key),
            tags=tuple((k, v) for k, v, _ in entries),
            quoted=frozenset(k for k, _, q in entries if q),
        )

    if STRUCTURED_VALUE_PATTERN.fullmatch(value):
        return GenericMetadata(text)
    return SimpleMetadata(key, value)
