import pytest

from inscripta.vcfcantor.exc import InvalidPositionException, ValidationException
from inscripta.vcfcantor.io.vcf.exc import MalformedMetadataLineError
from inscripta.vcfcantor.util.object_validation import ObjectValidation


class TestObjectValidation:
    @pytest.mark.parametrize("value", ["", " ", "a b", "a\tb", "a\n"])
    def test_require_text_without_whitespace(self, value):
        with pytest.raises(ValidationException):
            ObjectValidation.require_text_without_whitespace(value, "Name")

    def test_require_text_without_whitespace_passes(self):
        ObjectValidation.require_text_without_whitespace("chr1", "Name")

    def test_require_keys_present(self):
        ObjectValidation.require_keys_present(["ID", "Number"], ["ID"], "INFO")
        with pytest.raises(MalformedMetadataLineError):
            ObjectValidation.require_keys_present(["ID"], ["ID", "Type"], "INFO", MalformedMetadataLineError)

    def test_require_unique(self):
        ObjectValidation.require_unique(["a", "b"], "sample")
        with pytest.raises(ValidationException):
            ObjectValidation.require_unique(["a", "b", "a"], "sample")

    def test_require_span_ordered(self):
        ObjectValidation.require_span_ordered(5, 5)
        with pytest.raises(InvalidPositionException):
            ObjectValidation.require_span_ordered(5, 4)
