import warnings

import pytest

from inscripta.vcfcantor.io.vcf.constants import VcfMetadataType, VcfNumberFlag, VcfValueType
from inscripta.vcfcantor.io.vcf.exc import (
    MalformedMetadataLineError,
    MissingRequiredTagError,
    UnexpectedMetadataTagWarning,
    VersionMissingOrUnsupportedError,
)
from inscripta.vcfcantor.io.vcf.metadata import (
    FileFormatMetadata,
    GenericMetadata,
    SimpleMetadata,
    StructuredMetadata,
    parse_metadata_line,
    parse_version,
    split_structured_value,
)


class TestParseMetadataLine:
    @pytest.mark.parametrize(
        "line,expected_type",
        [
            ("##fileformat=VCFv4.2", FileFormatMetadata),
            ("##fileDate=20090805", SimpleMetadata),
            ("##reference=file:///seq/references/1000GenomesPilot-NCBI36.fasta", SimpleMetadata),
            ('##INFO=<ID=DB,Number=0,Type=Flag,Description="dbSNP membership, build 129">', StructuredMetadata),
            ('##FILTER=<ID=q10,Description="Quality below 10">', StructuredMetadata),
            ('##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">', StructuredMetadata),
            ('##ALT=<ID=DEL:ME:ALU,Description="Deletion of ALU element">', StructuredMetadata),
            ("##contig=<ID=20,length=62435964>", StructuredMetadata),
            ("##PEDIGREE=<ID=TumourSample,Original=GermlineID>", StructuredMetadata),
            ('##SAMPLE=<ID=S1,Genomes=Germline,Mixture=1.,Description="Patient germline genome">', StructuredMetadata),
            ("##META=<ID=Assay,Type=String,Number=.,Values=[WholeGenome, Exome]>", GenericMetadata),
            ("##GATKCommandLine=<ID=HaplotypeCaller,CommandLine=\"x=y\">", GenericMetadata),
            ("##just some text", GenericMetadata),
            ("##=no key", GenericMetadata),
        ],
    )
    def test_round_trip(self, line, expected_type):
        parsed = parse_metadata_line(line)
        assert type(parsed) is expected_type
        assert parsed.to_vcf_line() == line

    @pytest.mark.parametrize(
        "line",
        [
            '##INFO=<ID=X,Number=1,Type=String,Description="with \\"escaped\\" quotes and a \\\\ backslash">',
            '##INFO=<ID=X,Number=1,Type=String,Description="a, b, c = d",Source="tool <1>",Version="2">',
            "##contig=<ID=chr1,length=0>",
            '##FILTER=<Description="reversed order",ID=lowQ>',
        ],
    )
    def test_round_trip_quoting(self, line):
        assert parse_metadata_line(line).to_vcf_line() == line

    def test_structured_accessors(self):
        line = parse_metadata_line('##INFO=<ID=AF,Number=A,Type=Float,Description="Allele Frequency">')
        assert line.kind == VcfMetadataType.INFO
        assert line.id == "AF"
        assert line.number == VcfNumberFlag.PER_ALT_ALLELE
        assert line.type == VcfValueType.FLOAT
        assert line.description == "Allele Frequency"
        assert line.to_dict() == {"ID": "AF", "Number": "A", "Type": "Float", "Description": "Allele Frequency"}

    @pytest.mark.parametrize(
        "number,expected",
        [
            ("0", 0),
            ("2", 2),
            ("A", VcfNumberFlag.PER_ALT_ALLELE),
            ("G", VcfNumberFlag.PER_GENOTYPE),
            (".", VcfNumberFlag.UNBOUNDED),
            ("X", VcfNumberFlag.UNKNOWN),
        ],
    )
    def test_number(self, number, expected):
        line = parse_metadata_line(f'##FORMAT=<ID=F,Number={number},Type=Integer,Description="d">')
        assert line.number == expected

    def test_unknown_type(self):
        line = parse_metadata_line('##FORMAT=<ID=F,Number=1,Type=Blob,Description="d">')
        assert line.type == VcfValueType.UNKNOWN

    def test_unescaped_values(self):
        line = parse_metadata_line('##INFO=<ID=X,Number=1,Type=String,Description="say \\"hi\\"">')
        assert line.description == 'say "hi"'
        assert line.get_raw("Description") == 'say \\"hi\\"'

    def test_contig(self):
        line = parse_metadata_line('##contig=<ID=20,length=62435964,species="Homo sapiens">')
        assert line.kind == VcfMetadataType.CONTIG
        assert line.length == 62435964
        assert line.get("species") == "Homo sapiens"
        assert parse_metadata_line("##contig=<ID=20>").length is None

    def test_file_format(self):
        assert parse_metadata_line("##fileformat=VCFv4.3").version == "4.3"

    def test_simple(self):
        line = parse_metadata_line("##source=myImputationProgramV3.1")
        assert line == SimpleMetadata("source", "myImputationProgramV3.1")


class TestMetadataErrors:
    @pytest.mark.parametrize(
        "line",
        [
            '##INFO=<ID=X,Number=1,Description="no type">',
            '##FILTER=<ID=q10>',
            '##FORMAT=<Number=1,Type=String,Description="no id">',
            "##contig=<length=10>",
        ],
    )
    def test_missing_required_tag(self, line):
        with pytest.raises(MissingRequiredTagError):
            parse_metadata_line(line)

    @pytest.mark.parametrize(
        "line",
        [
            '##INFO=ID=X,Number=1,Type=String,Description="no brackets"',
            '##INFO=<ID=X,Number=1,Type=String,Description="unbalanced>',
            '##INFO=<ID=X,Number=1,Type=String,Description="d",junk>',
            '##INFO=<ID=X,ID=Y,Number=1,Type=String,Description="d">',
            "##contig=<ID=20,length=-5>",
            "##contig=<ID=20,length=long>",
            "#CHROM\tPOS",
        ],
    )
    def test_malformed(self, line):
        with pytest.raises(MalformedMetadataLineError):
            parse_metadata_line(line)

    @pytest.mark.parametrize("line", ["##fileformat=4.2", "##fileformat=VCF", "##fileformat=BCFv2"])
    def test_bad_version(self, line):
        with pytest.raises(VersionMissingOrUnsupportedError):
            parse_metadata_line(line)

    def test_unexpected_tag_warns(self):
        with pytest.warns(UnexpectedMetadataTagWarning):
            line = parse_metadata_line('##FILTER=<ID=q10,Description="d",Extra=1>')
        assert line.get("Extra") == "1"

    def test_free_form_kinds_do_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            parse_metadata_line("##PEDIGREE=<ID=Child,Father=Dad,Mother=Mum>")
            parse_metadata_line("##SAMPLE=<ID=S1,Assay=WholeGenome>")


class TestStructuredValue:
    def test_split(self):
        assert split_structured_value('ID=a,Description="x, \\"y\\"",n=1') == [
            ("ID", "a", False),
            ("Description", 'x, \\"y\\"', True),
            ("n", "1", False),
        ]

    def test_version(self):
        assert parse_version("VCFv4.2") == "4.2"
        assert parse_version("VCFv4") == "4"


class TestBuild:
    def test_build_quotes_free_text(self):
        line = StructuredMetadata.build(
            VcfMetadataType.INFO, {"ID": "DP", "Number": 1, "Type": "Integer", "Description": "Total Depth"}
        )
        assert line.to_vcf_line() == '##INFO=<ID=DP,Number=1,Type=Integer,Description="Total Depth">'
        assert parse_metadata_line(line.to_vcf_line()) == line

    def test_build_escapes(self):
        line = StructuredMetadata.build("FILTER", [("ID", "f"), ("Description", 'a "quoted" word')])
        assert line.to_vcf_line() == '##FILTER=<ID=f,Description="a \\"quoted\\" word">'
        assert line.description == 'a "quoted" word'

    def test_build_quotes_ambiguous_values(self):
        line = StructuredMetadata.build("contig", {"ID": "1", "species": "Homo sapiens"})
        assert line.to_vcf_line() == '##contig=<ID=1,species="Homo sapiens">'

    def test_build_validates(self):
        with pytest.raises(MissingRequiredTagError):
            StructuredMetadata.build("ALT", {"ID": "DEL"})
