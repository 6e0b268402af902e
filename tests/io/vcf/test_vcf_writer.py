import gzip
import io

import pytest

from inscripta.vcfcantor.io.vcf.collection import VcfColumnHeader, VcfMetadataCollection
from inscripta.vcfcantor.io.vcf.metadata import FileFormatMetadata, StructuredMetadata
from inscripta.vcfcantor.io.vcf.parser import parse_vcf
from inscripta.vcfcantor.io.vcf.position import VcfPosition
from inscripta.vcfcantor.io.vcf.writer import column_header_to_vcf, metadata_line_to_vcf, position_to_vcf, vcf_to_file


class TestWriteLines:
    def test_metadata_line(self):
        line = StructuredMetadata.build("FILTER", {"ID": "q10", "Description": "Quality below 10"})
        assert metadata_line_to_vcf(line) == '##FILTER=<ID=q10,Description="Quality below 10">'
        assert metadata_line_to_vcf(FileFormatMetadata("4.4")) == "##fileformat=VCFv4.4"

    def test_column_header(self):
        assert column_header_to_vcf(VcfColumnHeader.from_sample_names(["A", "B"])) == (
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tA\tB"
        )

    @pytest.mark.parametrize(
        "position,expected",
        [
            (VcfPosition("1", 5, "A"), "1\t5\t.\tA\t.\t.\t.\t."),
            (
                VcfPosition("1", 5, "AT", ["A", "<DEL>"], ids=["a", "b"], quality="1e3", filters=["PASS"]),
                "1\t5\ta;b\tAT\tA,<DEL>\t1e3\tPASS\t.",
            ),
            (
                VcfPosition(
                    "1",
                    5,
                    "A",
                    ["C"],
                    info={"DB": None, "AF": "0.5"},
                    format=["GT", "DP"],
                    samples=[{"GT": "0|1", "DP": None}, {}],
                ),
                "1\t5\t.\tA\tC\t.\t.\tDB;AF=0.5\tGT:DP\t0|1:.\t.",
            ),
        ],
    )
    def test_position(self, position, expected):
        assert position_to_vcf(position) == expected


class TestVcfToFile:
    def test_round_trip_plain(self, example_vcf, example_lines, tmp_path):
        metadata, positions = parse_vcf(example_vcf)
        out = tmp_path / "out.vcf"
        vcf_to_file(metadata, positions, out)
        assert out.read_text().splitlines() == example_lines

    def test_round_trip_bgzip(self, example_vcf, example_lines, tmp_path):
        metadata, positions = parse_vcf(example_vcf)
        out = tmp_path / "out.vcf.gz"
        vcf_to_file(metadata, positions, out)
        with gzip.open(out, "rt") as fh:
            assert fh.read().splitlines() == example_lines
        metadata_again, positions_again = parse_vcf(out)
        assert metadata_again == metadata
        assert [p.to_vcf_line() for p in positions_again] == example_lines[22:]

    def test_bgzip_flag(self, example_vcf, tmp_path):
        metadata, positions = parse_vcf(example_vcf)
        out = tmp_path / "compressed.vcf"
        vcf_to_file(metadata, positions, out, bgzip=True)
        with open(out, "rb") as fh:
            assert fh.read(2) == b"\x1f\x8b"

    def test_handle(self):
        metadata = VcfMetadataCollection([FileFormatMetadata("4.2")], VcfColumnHeader())
        handle = io.StringIO()
        vcf_to_file(metadata, [VcfPosition("1", 1, "A", ["C"])], handle)
        assert handle.getvalue().splitlines() == [
            "##fileformat=VCFv4.2",
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
            "1\t1\t.\tA\tC\t.\t.\t.",
        ]
        assert not handle.closed
