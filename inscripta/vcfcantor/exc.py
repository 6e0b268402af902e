class VcfCantorException(Exception):
    """
    Base exception class for VcfCantor.
    """

    pass


class InvalidPositionException(VcfCantorException):
    """
    Raised when a position or span is outside of a valid range for the operation being performed.
    """

    pass


class ValidationException(VcfCantorException):
    """
    Raised when object constructors are given invalid inputs that are not InvalidPositionExceptions.
    """

    pass


class AlleleIndexOutOfRangeError(ValidationException, IndexError):
    """
    Raised when a genotype refers to an allele index that the position does not declare. Decoding a genotype never
    raises this; it is raised when the index is dereferenced against a position.
    """

    pass
