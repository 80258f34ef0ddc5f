"""
Complex spectrum storage in split real/imaginary (structure-of-arrays) layout.

Real and imaginary parts live in two separate contiguous float64 arrays of
equal length. This keeps each component contiguous for the butterfly passes
and lets the numba kernels work on plain float arrays.
"""

import math

import numpy as np
from typing import Tuple

from .errors import InvalidArgument


class SpectrumBuffer:
    """
    Fixed-size buffer of complex values.

    Instances are created with :meth:`allocate`. The ``real`` and ``imag``
    arrays can be written element-wise but never rebound or resized, so
    ``len(real) == len(imag)`` holds for the lifetime of the buffer.

    Examples
    --------
    >>> buf = SpectrumBuffer.allocate(8)
    >>> buf.set(1, 3.0, 4.0)
    >>> buf.magnitude(1)
    5.0
    """

    __slots__ = ('_real', '_imag')

    def __init__(self, real: np.ndarray, imag: np.ndarray):
        for part, arr in (('real', real), ('imag', imag)):
            if not isinstance(arr, np.ndarray):
                raise InvalidArgument(f"{part} must be a numpy.ndarray, got {type(arr).__name__}")
            if arr.dtype != np.float64:
                raise InvalidArgument(f"{part} must be float64, got {arr.dtype}")
            if not arr.flags.c_contiguous or not arr.flags.writeable:
                raise InvalidArgument(f"{part} must be a contiguous, writable array")
        if real.shape != imag.shape or real.ndim != 1:
            raise InvalidArgument(
                f"real and imag must be 1D arrays of equal length, got {real.shape} and {imag.shape}"
            )
        if np.shares_memory(real, imag):
            raise InvalidArgument("real and imag must not share memory")
        self._real = real
        self._imag = imag

    @classmethod
    def allocate(cls, n: int) -> 'SpectrumBuffer':
        """
        Allocate a zero-initialised buffer.

        Parameters
        ----------
        n : int
            Number of complex elements

        Returns
        -------
        SpectrumBuffer
            New buffer with every component set to 0.0
        """
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise InvalidArgument(f"Buffer size must be an integer, got {type(n).__name__}")
        if n < 0:
            raise InvalidArgument(f"Buffer size must be non-negative, got {n}")
        return cls(np.zeros(int(n), dtype=np.float64), np.zeros(int(n), dtype=np.float64))

    @property
    def real(self) -> np.ndarray:
        """Real parts."""
        return self._real

    @property
    def imag(self) -> np.ndarray:
        """Imaginary parts."""
        return self._imag

    @property
    def size(self) -> int:
        return self._real.shape[0]

    def __len__(self) -> int:
        return self._real.shape[0]

    def get_real(self, index: int) -> float:
        return float(self._real[index])

    def get_imag(self, index: int) -> float:
        return float(self._imag[index])

    def set_real(self, index: int, value: float) -> None:
        self._real[index] = value

    def set_imag(self, index: int, value: float) -> None:
        self._imag[index] = value

    def get(self, index: int) -> Tuple[float, float]:
        """Return the complex value at ``index`` as a (real, imag) tuple."""
        return float(self._real[index]), float(self._imag[index])

    def set(self, index: int, real: float, imag: float) -> None:
        self._real[index] = real
        self._imag[index] = imag

    def magnitude(self, index: int) -> float:
        """sqrt(real² + imag²) at ``index``."""
        re = self._real[index]
        im = self._imag[index]
        return math.sqrt(re * re + im * im)

    def phase(self, index: int) -> float:
        """atan2(imag, real) at ``index``, in radians within [-pi, pi]."""
        return math.atan2(self._imag[index], self._real[index])

    # ============== Whole-buffer views ==============

    def magnitudes(self) -> np.ndarray:
        return np.hypot(self._real, self._imag)

    def phases(self) -> np.ndarray:
        return np.arctan2(self._imag, self._real)

    def to_complex(self) -> np.ndarray:
        """Copy the buffer into a new complex128 array."""
        out = np.empty(self.size, dtype=np.complex128)
        out.real = self._real
        out.imag = self._imag
        return out

    def clear(self) -> None:
        """Zero every component in place."""
        self._real.fill(0.0)
        self._imag.fill(0.0)

    def __repr__(self) -> str:
        return f"SpectrumBuffer(size={self.size})"


def allocate(n: int) -> SpectrumBuffer:
    """Allocate a zero-initialised SpectrumBuffer of size n."""
    return SpectrumBuffer.allocate(n)
