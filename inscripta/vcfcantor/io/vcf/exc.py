from typing import Optional

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.exc import InvalidInputError


class VcfParserError(InvalidInputError):
    """
    Raised when VCF text cannot be parsed. Parsers that know where they are in a file attach the 1-based line number
    and the raw line with :meth:`with_line_context`.
    """

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.line = line

    def with_line_context(self, line_number: int, line: str) -> "VcfParserError":
        if self.line_number is None:
            self.line_number = line_number
            self.line = line
        return self

    def __str__(self):
        if self.line_number is None:
            return self.message
        return f"{self.message} (line {self.line_number}: {self.line})"


class VersionMissingOrUnsupportedError(VcfParserError):
    """
    Raised when the first line of a file is not a ``##fileformat=VCFv<version>`` line.
    """

    pass


class MalformedMetadataLineError(VcfParserError):
    """
    Raised when a header line cannot be parsed, such as an unbalanced quote in a structured tag list.
    """

    pass


class MissingRequiredTagError(MalformedMetadataLineError):
    """
    Raised when a structured metadata line lacks a sub-tag its kind requires.
    """

    pass


class DuplicateMetadataIdError(MalformedMetadataLineError):
    """
    Raised when two structured metadata lines of the same kind share an ID.
    """

    pass


class MalformedDataLineError(VcfParserError):
    """
    Raised when a data line is structurally invalid in a way not covered by a more specific error.
    """

    pass


class ColumnCountMismatchError(MalformedDataLineError):
    """
    Raised when a data line does not have the number of columns implied by the column header.
    """

    pass


class SampleCountMismatchError(MalformedDataLineError):
    """
    Raised when a sample column has more fields than the FORMAT column declares.
    """

    pass


class AlleleSyntaxError(VcfParserError):
    """
    Raised when a REF or ALT token does not match any allele grammar.
    """

    def __init__(self, token: str, line_number: Optional[int] = None, line: Optional[str] = None):
        super().__init__(f"Invalid allele: {repr(token)}", line_number, line)
        self.token = token


class InvalidNumberError(VcfParserError):
    """
    Raised when a field that must be numeric (POS, QUAL, typed values) is not.
    """

    pass


class VcfValidationError(ValidationException):
    """
    Raised by :class:`~inscripta.vcfcantor.io.vcf.validator.VcfValidator` when a position disagrees with its header.
    """

    pass


class UnexpectedMetadataTagWarning(UserWarning):
    """
    Used when a structured metadata line has a sub-tag that is not defined for its kind.
    """

    pass
