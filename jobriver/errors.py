"""
Exception taxonomy for job insertion.

Storage failures are not wrapped: SQLAlchemy's own exceptions reach the caller
as the driver raised them.
"""


class JobRiverError(Exception):
    """Base class for errors raised by jobriver itself."""
    pass


class ArgsError(JobRiverError):
    """Job args don't satisfy the args capability. Raised before any I/O."""
    pass


class MissingKindError(ArgsError):
    """Args have no usable `kind`."""
    pass


class InvalidPayloadError(ArgsError):
    """`to_payload()` didn't produce JSON object text."""
    pass


class InsertOptsError(JobRiverError, ValueError):
    """An InsertOpts field holds a value outside its allowed range."""
    pass


class DecodeError(JobRiverError):
    """A stored job record doesn't have the expected shape."""
    pass
