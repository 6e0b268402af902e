from enum import Enum


class Strand(Enum):
    """Strand of a genomic coordinate. VCF coordinates are always on the plus strand."""

    PLUS = 1
    MINUS = -1
    UNSTRANDED = 0

    def __str__(self):
        return self.to_symbol()

    @staticmethod
    def from_symbol(value: str) -> "Strand":
        """Converts string representation of a strand to a Strand"""
        if value == "+":
            return Strand.PLUS
        if value == "-":
            return Strand.MINUS
        if value == ".":
            return Strand.UNSTRANDED
        raise ValueError("{} is not a valid string representation of a strand".format(value))

    def to_symbol(self) -> str:
        if self == Strand.PLUS:
            return "+"
        if self == Strand.MINUS:
            return "-"
        return "."
