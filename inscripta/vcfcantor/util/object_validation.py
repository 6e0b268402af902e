from typing import Iterable, Type

from inscripta.vcfcantor.exc import InvalidPositionException, ValidationException


class ObjectValidation:
    @staticmethod
    def require_text_without_whitespace(value: str, field_name: str):
        if not value:
            raise ValidationException(f"{field_name} must be a non-empty string")
        if any(c.isspace() for c in value):
            raise ValidationException(f"{field_name} must not contain whitespace: {repr(value)}")

    @staticmethod
    def require_keys_present(
        keys: Iterable[str],
        required: Iterable[str],
        description: str,
        exc_type: Type[Exception] = ValidationException,
    ):
        keys = set(keys)
        missing = [key for key in required if key not in keys]
        if missing:
            raise exc_type(f"{description} is missing required key(s): {', '.join(missing)}")

    @staticmethod
    def require_unique(values: Iterable[str], description: str, exc_type: Type[Exception] = ValidationException):
        seen = set()
        for value in values:
            if value in seen:
                raise exc_type(f"Duplicate {description}: {value}")
            seen.add(value)

    @staticmethod
    def require_span_ordered(start: int, end: int):
        if end < start:
            raise InvalidPositionException(f"End {end} is before start {start}; spans must satisfy start <= end")
