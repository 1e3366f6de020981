"""Exception types raised by sfs-mono.

All input validation errors derive from :class:`SFSError`, which is itself a
``ValueError`` so callers that only care about "bad input" can keep catching
``ValueError``.
"""


class SFSError(ValueError):
    """Base class for invalid input to a sound field computation."""

    pass


class InvalidSpecError(SFSError):
    """Raised for a malformed axis specification.

    Covers empty, non-numeric or non-finite specs, ranges with ``min >= max``
    and mixing a ``[min, max]`` range with explicit coordinate arrays.
    """

    pass


class ShapeMismatchError(InvalidSpecError):
    """Raised when explicit coordinate arrays disagree in shape."""

    pass


class CountMismatchError(SFSError):
    """Raised when the number of secondary sources and driving signals differ."""

    pass


class UnknownSourceModelError(SFSError):
    """Raised for a source model tag that is not point, line or plane wave."""

    pass


class InvalidParameterError(SFSError):
    """Raised for invalid numeric parameters (resolution, weights, ...)."""

    pass


class InvalidFrequencyError(InvalidParameterError):
    """Raised for a non-positive or non-finite frequency."""

    pass


class SynthesisCancelled(RuntimeError):
    """Raised when a running integration is cancelled by the caller."""

    pass
