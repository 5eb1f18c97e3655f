"""Error taxonomy for contact map calculations.

All errors are synchronous failures raised to the caller. Missing
coordinates and distances are represented as NaN in the arrays and are
never reported through these exceptions.
"""


class ContactMapError(Exception):
    """Base class for contact map errors."""


class ValidationError(ContactMapError, ValueError):
    """Invalid input: malformed radius or structures."""


class PreconditionError(ContactMapError):
    """An operation was invoked without the state it requires.

    Raised when `calculate` has no molecule pair or radius from either its
    arguments or stored state, and when bonds are requested from a map that
    does not hold a thresholded contact matrix.
    """


class StructuralError(ContactMapError):
    """A molecule cannot be mapped onto the coordinate tensor.

    Raised for empty molecules, unusable sequence numbers and residues that
    cannot be resolved during bond materialization.
    """
