"""
Base class for Fourier transform engines.

Every engine converts a real-valued signal into a complex spectrum held in a
SpectrumBuffer (forward) and reconstructs the real signal from it (inverse).
Both directions write into caller-supplied, pre-sized storage.
"""

import numpy as np
from abc import ABC, abstractmethod

from .buffer import SpectrumBuffer
from .errors import InvalidArgument


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def check_power_of_two(n: int, engine: str) -> None:
    if not is_power_of_two(n):
        raise InvalidArgument(f"{engine} requires input size to be a power of two, but got {n}")


def as_signal(signal) -> np.ndarray:
    """Convert an input signal to a contiguous 1-D float64 array (no copy if possible)."""
    try:
        if np.iscomplexobj(signal):
            raise InvalidArgument("Signal must be real-valued, got complex input")
        x = np.ascontiguousarray(signal, dtype=np.float64)
    except InvalidArgument:
        raise
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Signal must be a sequence of real numbers: {exc}") from exc

    if x.ndim != 1:
        raise InvalidArgument(f"Signal must be 1D, got shape {x.shape}")
    if x.shape[0] == 0:
        raise InvalidArgument("Signal must contain at least one sample")
    return x


def check_output_signal(signal) -> int:
    """Validate an inverse output array and return its length N."""
    if not isinstance(signal, np.ndarray):
        raise InvalidArgument(
            f"Output signal must be a numpy.ndarray, got {type(signal).__name__}"
        )
    if signal.ndim != 1:
        raise InvalidArgument(f"Output signal must be 1D, got shape {signal.shape}")
    if signal.dtype != np.float64:
        raise InvalidArgument(f"Output signal must be float64, got {signal.dtype}")
    if not signal.flags.writeable:
        raise InvalidArgument("Output signal is read-only")
    if signal.shape[0] == 0:
        raise InvalidArgument("Output signal must have at least one sample")
    return signal.shape[0]


def check_spectrum(spectrum, required: int) -> None:
    if not isinstance(spectrum, SpectrumBuffer):
        raise InvalidArgument(
            f"Spectrum must be a SpectrumBuffer, got {type(spectrum).__name__}"
        )
    if spectrum.size < required:
        raise InvalidArgument(
            f"Spectrum buffer too small: {spectrum.size} bins, {required} required"
        )


class FourierTransform(ABC):
    """
    Base class for Fourier transform engines.

    All engines must implement:
    - forward(): real signal -> complex spectrum
    - inverse(): complex spectrum -> real signal
    - required_bins(): number of bins read/written for an N-sample signal

    Engines validate their arguments before touching any buffer, so a call
    that raises InvalidArgument leaves both the signal and the spectrum as
    they were.
    """

    name = "FourierTransform"

    @abstractmethod
    def required_bins(self, n: int) -> int:
        """
        Number of spectrum bins this engine uses for an n-sample signal.

        Args:
            n: Signal length

        Returns:
            Minimum SpectrumBuffer size accepted by forward/inverse
        """
        pass

    @abstractmethod
    def forward(self, signal, spectrum: SpectrumBuffer) -> None:
        """
        Compute the forward transform (time domain -> frequency domain).

        Args:
            signal: Real-valued samples, any 1D array-like
            spectrum: Pre-allocated buffer with at least required_bins(N) bins

        Raises:
            InvalidArgument: if the length is unsupported or the buffer is undersized
        """
        pass

    @abstractmethod
    def inverse(self, spectrum: SpectrumBuffer, signal: np.ndarray) -> None:
        """
        Compute the inverse transform (frequency domain -> time domain).

        The length of ``signal`` defines N; the spectrum must hold at least
        required_bins(N) bins. The spectrum is not modified.

        Args:
            spectrum: Buffer holding the spectrum
            signal: Writable float64 array receiving the reconstructed samples

        Raises:
            InvalidArgument: if the length is unsupported or the buffer is undersized
        """
        pass

    def _validate_forward(self, signal, spectrum: SpectrumBuffer) -> np.ndarray:
        x = as_signal(signal)
        self._check_length(x.shape[0])
        check_spectrum(spectrum, self.required_bins(x.shape[0]))
        return x

    def _validate_inverse(self, spectrum: SpectrumBuffer, signal: np.ndarray) -> int:
        n = check_output_signal(signal)
        self._check_length(n)
        check_spectrum(spectrum, self.required_bins(n))
        return n

    def _check_length(self, n: int) -> None:
        """Hook for engines with a size constraint on N."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
