"""
Fast FFT Implementation using Numba JIT

This module implements the radix-2 Cooley-Tukey FFT with Numba JIT acceleration.
Optimizations:
1. Numba JIT compilation (nopython mode)
2. Iterative (non-recursive) implementation - avoids Python call overhead
3. In-place bit-reversal permutation on split real/imag arrays
4. Incremental twiddle factors - one complex multiply per butterfly instead of cos/sin
5. Cache compiled functions

The input length must be a power of two.
"""

import math

import numpy as np
from numba import jit

from .base import FourierTransform, check_power_of_two
from .buffer import SpectrumBuffer


@jit(nopython=True, cache=True, nogil=True)
def _bit_reverse_permute(real: np.ndarray, imag: np.ndarray):
    """
    Reorder both arrays so index i ends up at bit_reverse(i).

    j tracks the mirrored index of i and is advanced by adding 1 from the
    most significant bit downwards. Only pairs with i < j are swapped, so no
    pair is swapped twice.
    """
    N = len(real)
    j = 0
    for i in range(N - 1):
        if i < j:
            tmp = real[i]
            real[i] = real[j]
            real[j] = tmp
            tmp = imag[i]
            imag[i] = imag[j]
            imag[j] = tmp
        m = N >> 1
        while m <= j:
            j -= m
            m >>= 1
        j += m


@jit(nopython=True, cache=True, nogil=True)
def _butterfly_stages(real: np.ndarray, imag: np.ndarray, sign: float):
    """
    Iterative Cooley-Tukey radix-2 DIT butterflies (Numba JIT).

    Expects bit-reversed input. sign is -1.0 for the forward transform and
    +1.0 for the inverse (unscaled).
    """
    N = len(real)

    # Process stages: size 2, 4, 8, ..., N
    length = 2
    while length <= N:
        half = length >> 1
        angle = sign * 2.0 * math.pi / length
        w_step_re = math.cos(angle)
        w_step_im = math.sin(angle)

        for start in range(0, N, length):
            w_re = 1.0
            w_im = 0.0

            for k in range(half):
                u = start + k
                v = u + half

                tr = w_re * real[v] - w_im * imag[v]
                ti = w_re * imag[v] + w_im * real[v]

                real[v] = real[u] - tr
                imag[v] = imag[u] - ti
                real[u] += tr
                imag[u] += ti

                next_re = w_re * w_step_re - w_im * w_step_im
                w_im = w_re * w_step_im + w_im * w_step_re
                w_re = next_re

        length <<= 1


@jit(nopython=True, cache=True, nogil=True)
def _butterfly_range(real: np.ndarray, imag: np.ndarray, length: int,
                     angle_step: float, start_idx: int, end_idx: int):
    """
    Butterflies [start_idx, end_idx) of one stage, numbered globally 0..N/2.

    Global butterfly idx belongs to block idx // half at position idx % half.
    The range may cross block boundaries; the twiddle is recomputed with
    cos/sin at the start of each block segment and advanced incrementally
    inside it.
    """
    half = length >> 1
    w_step_re = math.cos(angle_step)
    w_step_im = math.sin(angle_step)

    idx = start_idx
    while idx < end_idx:
        block = idx // half
        k_start = idx % half
        base = block * length
        k_end = min(half, k_start + (end_idx - idx))

        w_re = math.cos(angle_step * k_start)
        w_im = math.sin(angle_step * k_start)

        for k in range(k_start, k_end):
            u = base + k
            v = u + half

            tr = w_re * real[v] - w_im * imag[v]
            ti = w_re * imag[v] + w_im * real[v]

            real[v] = real[u] - tr
            imag[v] = imag[u] - ti
            real[u] += tr
            imag[u] += ti

            next_re = w_re * w_step_re - w_im * w_step_im
            w_im = w_re * w_step_im + w_im * w_step_re
            w_re = next_re

        idx += k_end - k_start


def _load_signal(x: np.ndarray, real: np.ndarray, imag: np.ndarray) -> None:
    real[:] = x
    imag.fill(0.0)


class RadixTwoFFT(FourierTransform):
    """
    Single-threaded iterative radix-2 Cooley-Tukey FFT, O(N log N).

    Computes the full N-bin spectrum. N must be a power of two; any other
    length raises InvalidArgument from both forward() and inverse().

    Notes
    -----
    Twiddle factors are produced by repeated multiplication with a per-stage
    rotation step and are never renormalised, so rounding error grows slowly
    with N. Round trips stay well within 1e-9 up to N = 32768.
    """

    name = "fft"

    def required_bins(self, n: int) -> int:
        return n

    def _check_length(self, n: int) -> None:
        check_power_of_two(n, self.__class__.__name__)

    def forward(self, signal, spectrum: SpectrumBuffer) -> None:
        x = self._validate_forward(signal, spectrum)
        n = x.shape[0]
        real = spectrum.real[:n]
        imag = spectrum.imag[:n]

        _load_signal(x, real, imag)
        self._process_in_place(real, imag, invert=False)

    def inverse(self, spectrum: SpectrumBuffer, signal: np.ndarray) -> None:
        n = self._validate_inverse(spectrum, signal)

        # Work on copies so the caller's spectrum survives the inverse
        real = spectrum.real[:n].copy()
        imag = spectrum.imag[:n].copy()

        self._process_in_place(real, imag, invert=True)
        np.divide(real, n, out=signal)

    def _process_in_place(self, real: np.ndarray, imag: np.ndarray, invert: bool) -> None:
        _bit_reverse_permute(real, imag)
        _butterfly_stages(real, imag, 1.0 if invert else -1.0)
