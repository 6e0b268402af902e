"""
I/O exceptions.
"""
from inscripta.vcfcantor.exc import VcfCantorException


class VcfCantorIOException(VcfCantorException):
    pass


class InvalidInputError(VcfCantorIOException):
    pass


class UnsupportedHandleError(VcfCantorIOException):
    pass
