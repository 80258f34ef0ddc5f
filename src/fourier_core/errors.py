"""
Exceptions raised by fourier_core.
"""


class FourierError(Exception):
    """Base class for errors raised by fourier_core."""


class InvalidArgument(FourierError, ValueError):
    """Raised when a signal or buffer does not fit the engine's constraints."""
