import pytest
from pathlib import Path


@pytest.fixture
def test_data_dir() -> Path:
    return Path(__file__).parent / "data"


@pytest.fixture
def example_vcf(test_data_dir) -> Path:
    """22 header lines, samples NA00001-NA00003, 9 data lines."""
    return test_data_dir / "example.vcf"


@pytest.fixture
def example_lines(example_vcf):
    with open(example_vcf) as fh:
        return fh.read().splitlines()
