"""
Conversion between VCF text and Python values for the ``Type=`` vocabulary of INFO and FORMAT lines.

Decoded floats are :class:`VcfFloat` instances, which compare as ordinary floats but remember the text they were
parsed from. Encoding a decoded value therefore reproduces its input exactly, e.g. ``"50.0"`` stays ``"50.0"`` and
``"1e3"`` stays ``"1e3"``.
"""
import re
from typing import Any, List, Optional, Union

from inscripta.vcfcantor.io.vcf.constants import LIST_SEPARATOR, MISSING_VALUE, VcfValueType
from inscripta.vcfcantor.io.vcf.exc import InvalidNumberError, VcfParserError

INTEGER_PATTERN = re.compile(r"[-+]?\d+")
FLOAT_PATTERN = re.compile(r"[-+]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|[Nn]a[Nn]|[Ii]nf(?:inity)?)")


class VcfFloat(float):
    """A float that keeps the text it was parsed from."""

    def __new__(cls, text: str):
        if not FLOAT_PATTERN.fullmatch(text):
            raise InvalidNumberError(f"{repr(text)} is not a valid floating point number")
        value = super().__new__(cls, text)
        value.text = text
        return value

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"VcfFloat({repr(self.text)})"


def parse_integer(text: str, field_name: str = "Value") -> int:
    if not INTEGER_PATTERN.fullmatch(text):
        raise InvalidNumberError(f"{field_name} {repr(text)} is not an integer")
    return int(text)


def parse_float(text: str, field_name: str = "Value") -> VcfFloat:
    if not FLOAT_PATTERN.fullmatch(text):
        raise InvalidNumberError(f"{field_name} {repr(text)} is not a number")
    return VcfFloat(text)


def format_float(value: float) -> str:
    if isinstance(value, VcfFloat):
        return value.text
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def decode_value(raw: Optional[str], value_type: VcfValueType) -> Any:
    """
    Decode a single value.

    Args:
        raw: The text of the value. ``None`` is only meaningful for flags, where it means the flag is present.
        value_type: The declared type.

    Returns:
        ``True`` for flags, ``None`` for the missing value ``.``, otherwise an ``int``, :class:`VcfFloat` or ``str``.

    Raises:
        InvalidNumberError: if a numeric type does not hold a number.
        VcfParserError: if a Character value is longer than one character.
    """
    if value_type == VcfValueType.FLAG:
        return True
    if raw is None or raw == MISSING_VALUE:
        return None
    if value_type == VcfValueType.INTEGER:
        return parse_integer(raw)
    if value_type == VcfValueType.FLOAT:
        return parse_float(raw)
    if value_type == VcfValueType.CHARACTER and len(raw) != 1:
        raise VcfParserError(f"{repr(raw)} is not a single character")
    return raw


def decode_list(raw: Optional[str], value_type: VcfValueType) -> Optional[List[Any]]:
    """Decode a comma-separated list. A lone ``.`` is a missing list; ``.`` elements are missing values."""
    if raw is None or raw == MISSING_VALUE:
        return None
    return [decode_value(item, value_type) for item in raw.split(LIST_SEPARATOR)]


def encode_value(value: Any) -> str:
    if value is None:
        return MISSING_VALUE
    if isinstance(value, bool):
        raise ValueError("Flags have no encoded value; write the key alone")
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def encode_list(values: Optional[List[Union[int, float, str, None]]]) -> str:
    if values is None:
        return MISSING_VALUE
    return LIST_SEPARATOR.join(encode_value(v) for v in values)
