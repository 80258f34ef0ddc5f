"""
Direct O(N^2) Discrete Fourier Transform using Numba JIT

Two engines:
1. NaiveDFT - every bin by direct complex summation, the correctness oracle
2. SymmetricDFT - bins [0, N/2] only, using the Hermitian symmetry of real input

Both accept any N >= 1.
"""

import math

import numpy as np
from numba import jit

from .base import FourierTransform
from .buffer import SpectrumBuffer


@jit(nopython=True, cache=True)
def _dft_naive_forward(x: np.ndarray, out_real: np.ndarray, out_imag: np.ndarray):
    """X[k] = sum_j x[j] * exp(-2i*pi*k*j/N) for k in [0, N)."""
    N = len(x)
    for k in range(N):
        s_re = 0.0
        s_im = 0.0
        for j in range(N):
            # Reduce k*j mod N so the angle stays within one turn
            angle = 2.0 * math.pi * ((k * j) % N) / N
            s_re += x[j] * math.cos(angle)
            s_im -= x[j] * math.sin(angle)
        out_real[k] = s_re
        out_imag[k] = s_im


@jit(nopython=True, cache=True)
def _dft_naive_inverse(in_real: np.ndarray, in_imag: np.ndarray, out: np.ndarray):
    """x[j] = Re(sum_k X[k] * exp(2i*pi*k*j/N)) / N over all N bins."""
    N = len(out)
    for j in range(N):
        s_re = 0.0
        for k in range(N):
            angle = 2.0 * math.pi * ((k * j) % N) / N
            s_re += in_real[k] * math.cos(angle) - in_imag[k] * math.sin(angle)
        out[j] = s_re / N


@jit(nopython=True, cache=True)
def _dft_half_forward(x: np.ndarray, out_real: np.ndarray, out_imag: np.ndarray):
    """Bins 0..N/2 inclusive; the rest follow from X[N-k] = conj(X[k])."""
    N = len(x)
    for k in range(N // 2 + 1):
        s_re = 0.0
        s_im = 0.0
        for j in range(N):
            angle = 2.0 * math.pi * ((k * j) % N) / N
            s_re += x[j] * math.cos(angle)
            s_im -= x[j] * math.sin(angle)
        out_real[k] = s_re
        out_imag[k] = s_im


@jit(nopython=True, cache=True)
def _dft_half_inverse(in_real: np.ndarray, in_imag: np.ndarray, out: np.ndarray):
    """
    Reconstruct N real samples from bins 0..N/2.

    Bin 0 counts once, paired bins 1..(N-1)//2 count twice (their conjugate
    partner contributes the same real part), and the Nyquist bin counts once
    when N is even.
    """
    N = len(out)
    max_paired = (N - 1) // 2
    for j in range(N):
        s_re = in_real[0]
        for k in range(1, max_paired + 1):
            angle = 2.0 * math.pi * ((k * j) % N) / N
            s_re += 2.0 * (in_real[k] * math.cos(angle) - in_imag[k] * math.sin(angle))

        if N % 2 == 0:
            half = N // 2
            angle = 2.0 * math.pi * ((half * j) % N) / N
            s_re += in_real[half] * math.cos(angle) - in_imag[half] * math.sin(angle)

        out[j] = s_re / N


class NaiveDFT(FourierTransform):
    """
    Straightforward O(N^2) DFT computing all N bins.

    Slow, but has no size constraint and no clever indexing, which makes it
    the reference the faster engines are checked against.
    """

    name = "naive"

    def required_bins(self, n: int) -> int:
        return n

    def forward(self, signal, spectrum: SpectrumBuffer) -> None:
        x = self._validate_forward(signal, spectrum)
        n = x.shape[0]
        _dft_naive_forward(x, spectrum.real[:n], spectrum.imag[:n])

    def inverse(self, spectrum: SpectrumBuffer, signal: np.ndarray) -> None:
        n = self._validate_inverse(spectrum, signal)
        _dft_naive_inverse(spectrum.real[:n], spectrum.imag[:n], signal)


class SymmetricDFT(FourierTransform):
    """
    O(N^2) DFT storing only the non-negative frequency bins.

    forward() writes bins [0, N/2] (N//2 + 1 values), roughly halving the work
    of NaiveDFT. inverse() takes N from the length of the output signal, so a
    half spectrum of size N//2 + 1 can be turned back into either an even or
    an odd length signal; the caller decides which by the array it passes.
    """

    name = "symmetric"

    def required_bins(self, n: int) -> int:
        return n // 2 + 1

    def forward(self, signal, spectrum: SpectrumBuffer) -> None:
        x = self._validate_forward(signal, spectrum)
        bins = self.required_bins(x.shape[0])
        _dft_half_forward(x, spectrum.real[:bins], spectrum.imag[:bins])

    def inverse(self, spectrum: SpectrumBuffer, signal: np.ndarray) -> None:
        n = self._validate_inverse(spectrum, signal)
        bins = self.required_bins(n)
        _dft_half_inverse(spectrum.real[:bins], spectrum.imag[:bins], signal)
