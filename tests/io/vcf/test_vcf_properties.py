import pytest

from inscripta.vcfcantor.exc import ValidationException
from inscripta.vcfcantor.io.vcf.constants import VcfValueType
from inscripta.vcfcantor.io.vcf.genotype import Genotype
from inscripta.vcfcantor.io.vcf.metadata import StructuredMetadata
from inscripta.vcfcantor.io.vcf.properties import (
    GENERIC_CODEC,
    ReservedFormatProperty,
    ReservedInfoProperty,
    VcfInfo,
    VcfSample,
    format_property_codec,
    info_property_codec,
    metadata_codec,
)


class TestCodecTables:
    @pytest.mark.parametrize(
        "key,value_type,is_list",
        [
            ("DP", VcfValueType.INTEGER, False),
            ("AF", VcfValueType.FLOAT, True),
            ("DB", VcfValueType.FLAG, False),
            ("END", VcfValueType.INTEGER, False),
            ("CIGAR", VcfValueType.STRING, True),
        ],
    )
    def test_info_codec(self, key, value_type, is_list):
        codec = info_property_codec(key)
        assert codec.value_type == value_type
        assert codec.is_list is is_list

    def test_unknown_keys_pass_through(self):
        assert info_property_codec("SVTYPE") is GENERIC_CODEC
        assert format_property_codec("XX") is GENERIC_CODEC
        assert GENERIC_CODEC.decode("1,2") == "1,2"
        assert GENERIC_CODEC.encode("1,2") == "1,2"

    def test_reserved_format_codecs(self):
        assert format_property_codec("GT").decode("0|1") == Genotype.from_string("0|1")
        assert format_property_codec("GT").encode(Genotype.from_string("0|1")) == "0|1"
        assert format_property_codec("FT").decode("q10;s50") == ["q10", "s50"]
        assert format_property_codec("FT").encode(["q10", "s50"]) == "q10;s50"
        assert format_property_codec("FT").encode([]) == "."
        assert format_property_codec("PL").decode("0,10,100") == [0, 10, 100]

    def test_codec_from_metadata(self):
        single = StructuredMetadata.build("INFO", {"ID": "XI", "Number": "1", "Type": "Integer", "Description": "x"})
        listed = StructuredMetadata.build("INFO", {"ID": "XF", "Number": "A", "Type": "Float", "Description": "x"})
        assert metadata_codec(single).decode("3") == 3
        assert metadata_codec(listed).decode("0.5,1.5") == [0.5, 1.5]


class TestVcfInfo:
    info = VcfInfo([("NS", "3"), ("DP", "14"), ("AF", "0.5,0.017"), ("DB", None), ("SVTYPE", "DEL")])

    def test_round_trip(self):
        assert self.info.to_vcf_string() == "NS=3;DP=14;AF=0.5,0.017;DB;SVTYPE=DEL"

    def test_empty(self):
        assert VcfInfo().to_vcf_string() == "."

    def test_mapping(self):
        assert list(self.info) == ["NS", "DP", "AF", "DB", "SVTYPE"]
        assert self.info["DP"] == "14"
        assert "H2" not in self.info
        assert len(self.info) == 5

    def test_flags(self):
        assert self.info.is_flag("DB")
        assert not self.info.is_flag("DP")
        assert not self.info.is_flag("H2")
        assert self.info.get_reserved(ReservedInfoProperty.DBSNP) is True
        assert self.info.get_reserved(ReservedInfoProperty.HAPMAP2) is None

    def test_reserved(self):
        assert self.info.get_reserved(ReservedInfoProperty.DEPTH) == 14
        assert self.info.get_reserved(ReservedInfoProperty.ALLELE_FREQUENCY) == [0.5, 0.017]

    def test_converted(self):
        assert self.info.get_converted("NS") == 3
        assert self.info.get_converted("SVTYPE") == "DEL"
        assert self.info.get_converted("missing") is None
        header = StructuredMetadata.build("INFO", {"ID": "NS", "Number": "1", "Type": "String", "Description": "x"})
        assert self.info.get_converted("NS", header) == "3"

    def test_values_may_contain_equals(self):
        info = VcfInfo({"CSQ": "a=b"})
        assert info.to_vcf_string() == "CSQ=a=b"

    @pytest.mark.parametrize(
        "items",
        [
            [("", "1")],
            [("DP", "1"), ("DP", "2")],
            [("A;B", "1")],
            [("A=B", "1")],
            [("DP", "1;2")],
            [("DP", "1\t2")],
        ],
    )
    def test_invalid(self, items):
        with pytest.raises(ValidationException):
            VcfInfo(items)

    def test_equality_is_ordered(self):
        assert VcfInfo([("A", "1"), ("B", "2")]) == VcfInfo([("A", "1"), ("B", "2")])
        assert VcfInfo([("A", "1"), ("B", "2")]) != VcfInfo([("B", "2"), ("A", "1")])
        assert hash(VcfInfo({"A": "1"})) == hash(VcfInfo({"A": "1"}))
        assert VcfInfo({"A": "1"}) != VcfSample({"A": "1"})


class TestVcfSample:
    def test_reserved(self):
        sample = VcfSample({"GT": "0|1", "GQ": "48", "DP": "8", "HQ": "51,51"})
        assert sample.genotype == Genotype.from_string("0|1")
        assert sample.get_reserved(ReservedFormatProperty.GENOTYPE_QUALITY) == 48
        assert sample.get_reserved(ReservedFormatProperty.HAPLOTYPE_QUALITIES) == [51, 51]
        assert sample.get_reserved(ReservedFormatProperty.PHASE_SET) is None
        assert sample.get_converted("HQ") == [51, 51]

    @pytest.mark.parametrize(
        "values,keys,expected",
        [
            ({"GT": "0/0", "GQ": "41", "DP": "3"}, ["GT", "GQ", "DP", "HQ"], "0/0:41:3"),
            ({"GT": "0/0", "DP": "3"}, ["GT", "GQ", "DP"], "0/0:.:3"),
            ({"GT": "0/0", "GQ": None}, ["GT", "GQ", "DP"], "0/0:."),
            ({"GT": None}, ["GT"], "."),
            ({}, ["GT", "GQ"], "."),
        ],
    )
    def test_to_vcf_string(self, values, keys, expected):
        assert VcfSample(values).to_vcf_string(keys) == expected

    def test_separator_in_value(self):
        with pytest.raises(ValidationException):
            VcfSample({"GT": "0:1"})

    def test_genotype_likelihoods(self):
        sample = VcfSample({"GT": "0/1", "GL": "-0.1,-1.5,-9.0"})
        likelihoods = sample.genotype_likelihoods(2)
        assert likelihoods == {(0, 0): -0.1, (0, 1): -1.5, (1, 1): -9.0}

    def test_genotype_likelihoods_wrong_count(self):
        sample = VcfSample({"GT": "0/1", "GL": "-0.1,-1.5"})
        with pytest.raises(ValidationException):
            sample.genotype_likelihoods(2)

    def test_no_genotype_likelihoods(self):
        assert VcfSample({"GT": "0/1"}).genotype_likelihoods(2) is None
