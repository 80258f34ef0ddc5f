"""
Unit Tests for the fourier_core engines

This test suite validates the hand-written DFT/FFT engines against known
analytic spectra, against each other, and against scipy.fft.

Test Coverage:
    - SpectrumBuffer: allocation, accessors, magnitude/phase
    - Every engine: round trip, DC, impulse, Nyquist, sine localisation, amplitude
    - Size gate of the radix-2 engines and undersized buffers
    - Cross-engine equivalence

Run:
    pytest tests/test_fourier_core.py -v
"""

import sys
import os
import math

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest
from scipy.fft import fft as scipy_fft

from fourier_core import (
    FourierError,
    FourierTransform,
    InvalidArgument,
    NaiveDFT,
    ParallelRadixTwoFFT,
    RadixTwoFFT,
    SpectrumBuffer,
    SymmetricDFT,
    allocate,
    is_power_of_two,
)


class TestSpectrumBuffer:
    """Test suite for SpectrumBuffer."""

    def test_allocate_zeroed(self):
        buf = SpectrumBuffer.allocate(16)
        assert buf.size == 16
        assert len(buf) == 16
        assert buf.real.dtype == np.float64
        assert np.all(buf.real == 0.0)
        assert np.all(buf.imag == 0.0)

    def test_module_level_allocate(self):
        buf = allocate(5)
        assert isinstance(buf, SpectrumBuffer)
        assert buf.size == 5

    def test_allocate_empty(self):
        assert allocate(0).size == 0

    def test_allocate_rejects_negative(self):
        with pytest.raises(InvalidArgument):
            allocate(-1)

    def test_allocate_rejects_non_integer(self):
        with pytest.raises(InvalidArgument):
            allocate(2.5)

    def test_accessors(self):
        buf = allocate(4)
        buf.set_real(1, 2.0)
        buf.set_imag(1, -3.0)
        buf.set(2, 0.5, 0.25)

        assert buf.get_real(1) == 2.0
        assert buf.get_imag(1) == -3.0
        assert buf.get(1) == (2.0, -3.0)
        assert buf.get(2) == (0.5, 0.25)
        assert buf.real[2] == 0.5
        assert buf.imag[2] == 0.25

    def test_magnitude_and_phase(self):
        buf = allocate(3)
        buf.set(0, 3.0, 4.0)
        buf.set(1, 0.0, 1.0)
        buf.set(2, -1.0, 0.0)

        assert buf.magnitude(0) == pytest.approx(5.0)
        assert buf.phase(1) == pytest.approx(math.pi / 2)
        assert buf.phase(2) == pytest.approx(math.pi)
        np.testing.assert_allclose(buf.magnitudes(), [5.0, 1.0, 1.0])
        np.testing.assert_allclose(buf.phases(), [math.atan2(4.0, 3.0), math.pi / 2, math.pi])

    def test_arrays_cannot_be_rebound(self):
        buf = allocate(4)
        with pytest.raises(AttributeError):
            buf.real = np.zeros(8)
        with pytest.raises(AttributeError):
            buf.imag = np.zeros(8)
        assert buf.size == 4

    @pytest.mark.parametrize("dtype", [np.int64, np.float32, np.complex128])
    def test_constructor_rejects_non_float64(self, dtype):
        with pytest.raises(InvalidArgument, match="float64"):
            SpectrumBuffer(np.zeros(4, dtype=dtype), np.zeros(4, dtype=dtype))

    def test_constructor_rejects_shared_arrays(self):
        shared = np.zeros(4)
        with pytest.raises(InvalidArgument, match="share memory"):
            SpectrumBuffer(shared, shared)

        # Overlapping views of one array alias the components as well
        backing = np.zeros(8)
        with pytest.raises(InvalidArgument, match="share memory"):
            SpectrumBuffer(backing[:4], backing[2:6])

    def test_constructor_rejects_mismatched_shapes(self):
        with pytest.raises(InvalidArgument):
            SpectrumBuffer(np.zeros(4), np.zeros(5))
        with pytest.raises(InvalidArgument):
            SpectrumBuffer(np.zeros((2, 2)), np.zeros((2, 2)))
        with pytest.raises(InvalidArgument):
            SpectrumBuffer([0.0, 0.0], [0.0, 0.0])

    def test_constructor_accepts_float64_arrays(self):
        buf = SpectrumBuffer(np.zeros(4), np.zeros(4))
        RadixTwoFFT().forward([0.3, 0.1, 0.2, 0.7], buf)
        np.testing.assert_allclose(buf.real, [1.3, 0.1, -0.3, 0.1], atol=1e-12)
        np.testing.assert_allclose(buf.imag, [0.0, 0.6, 0.0, -0.6], atol=1e-12)

    def test_to_complex_and_clear(self):
        buf = allocate(2)
        buf.set(0, 1.0, 2.0)
        buf.set(1, -1.0, 0.5)

        z = buf.to_complex()
        np.testing.assert_array_equal(z, np.array([1 + 2j, -1 + 0.5j]))

        # to_complex returns a copy
        z[0] = 0
        assert buf.get(0) == (1.0, 2.0)

        buf.clear()
        assert np.all(buf.real == 0.0) and np.all(buf.imag == 0.0)


def test_is_power_of_two():
    assert [n for n in range(0, 20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]


def test_invalid_argument_hierarchy():
    assert issubclass(InvalidArgument, FourierError)
    assert issubclass(InvalidArgument, ValueError)


class TransformContract:
    """
    Properties every engine must satisfy.

    Subclasses provide create_transform(); engines owning resources are
    closed in teardown_method.
    """

    full_spectrum = True
    tolerance = 1e-6

    def create_transform(self):
        raise NotImplementedError

    def setup_method(self):
        self.transform = self.create_transform()

    def teardown_method(self):
        if isinstance(self.transform, ParallelRadixTwoFFT):
            self.transform.close()

    def _retained(self, n: int) -> int:
        return n if self.full_spectrum else n // 2 + 1

    def _round_trip(self, x: np.ndarray):
        spectrum = allocate(len(x))
        self.transform.forward(x, spectrum)
        restored = np.empty(len(x), dtype=np.float64)
        self.transform.inverse(spectrum, restored)
        return spectrum, restored

    def test_small(self):
        x = np.array([1.0, 2.0, 3.0, 4.0])
        _, restored = self._round_trip(x)
        np.testing.assert_allclose(restored, x, atol=self.tolerance)

    def test_accepts_python_list(self):
        spectrum = allocate(4)
        self.transform.forward([1.0, 0.0, -1.0, 0.0], spectrum)
        assert spectrum.get_real(1) == pytest.approx(2.0)

    def test_sine(self):
        """12 cycles over 4096 samples peak at bin 12."""
        n = 4096
        periods = 12
        x = np.sin(2.0 * np.pi * periods * np.arange(n) / n)
        spectrum, restored = self._round_trip(x)

        magnitudes = np.array([spectrum.magnitude(i) for i in range(n // 2 + 1)])
        print(f"\n[{self.transform.name} Sine] peak bin: {int(np.argmax(magnitudes))}")

        assert int(np.argmax(magnitudes)) == periods
        np.testing.assert_allclose(restored, x, atol=self.tolerance)

    def test_zero_input(self):
        n = 1024
        spectrum, restored = self._round_trip(np.zeros(n))

        np.testing.assert_allclose(spectrum.real[:n // 2 + 1], 0.0, atol=self.tolerance)
        np.testing.assert_allclose(spectrum.imag[:n // 2 + 1], 0.0, atol=self.tolerance)
        np.testing.assert_allclose(restored, 0.0, atol=self.tolerance)

    def test_constant_input(self):
        n = 1024
        value = 5.0
        spectrum, restored = self._round_trip(np.full(n, value))

        assert spectrum.get_real(0) == pytest.approx(value * n, abs=self.tolerance)
        assert spectrum.get_imag(0) == pytest.approx(0.0, abs=self.tolerance)
        np.testing.assert_allclose(spectrum.real[1:self._retained(n)], 0.0, atol=self.tolerance)
        np.testing.assert_allclose(spectrum.imag[1:self._retained(n)], 0.0, atol=self.tolerance)
        np.testing.assert_allclose(restored, value, atol=self.tolerance)

    def test_odd_length_input(self):
        x = np.array([1.0, 2.0, 3.0])
        _, restored = self._round_trip(x)
        np.testing.assert_allclose(restored, x, atol=self.tolerance)

    def test_single_element_input(self):
        spectrum, restored = self._round_trip(np.array([42.0]))

        assert spectrum.get(0) == pytest.approx((42.0, 0.0))
        assert restored[0] == pytest.approx(42.0, abs=self.tolerance)

    def test_nyquist(self):
        n = 1024
        x = np.where(np.arange(n) % 2 == 0, 1.0, -1.0)
        spectrum, restored = self._round_trip(x)

        assert spectrum.get_real(n // 2) == pytest.approx(float(n), abs=self.tolerance)
        assert spectrum.get_imag(n // 2) == pytest.approx(0.0, abs=self.tolerance)
        np.testing.assert_allclose(restored, x, atol=self.tolerance)

    def test_impulse(self):
        n = 8
        x = np.zeros(n)
        x[0] = 1.0
        spectrum, restored = self._round_trip(x)

        for i in range(self._retained(n)):
            assert spectrum.get_real(i) == pytest.approx(1.0, abs=self.tolerance)
            assert spectrum.get_imag(i) == pytest.approx(0.0, abs=self.tolerance)

        assert restored[0] == pytest.approx(1.0, abs=self.tolerance)
        np.testing.assert_allclose(restored[1:], 0.0, atol=self.tolerance)

    def test_amplitude(self):
        n = 1024
        k = 10
        amplitude = 3.0
        x = amplitude * np.cos(2.0 * np.pi * k * np.arange(n) / n)
        spectrum, restored = self._round_trip(x)

        assert spectrum.get_real(k) == pytest.approx(amplitude * n / 2.0, abs=self.tolerance)
        assert spectrum.get_imag(k) == pytest.approx(0.0, abs=self.tolerance)
        np.testing.assert_allclose(restored, x, atol=self.tolerance)

    def test_random_signal(self):
        rng = np.random.default_rng(128)
        x = rng.uniform(-50.0, 50.0, 128)
        _, restored = self._round_trip(x)

        error = np.abs(restored - x)
        print(f"\n[{self.transform.name} Random] max error: {error.max():.2e}")
        assert error.max() < 1e-9

    def test_matches_scipy(self):
        rng = np.random.default_rng(7)
        n = 256
        x = rng.standard_normal(n)
        spectrum = allocate(n)
        self.transform.forward(x, spectrum)

        bins = self._retained(n)
        error = np.abs(spectrum.to_complex()[:bins] - scipy_fft(x)[:bins])
        print(f"\n[{self.transform.name} vs scipy] max error: {error.max():.2e}")
        assert error.max() < 1e-9

    def test_inverse_leaves_spectrum_intact(self):
        x = np.array([0.5, -1.0, 2.0, 0.0, 1.5, 3.0, -2.0, 1.0])
        spectrum = allocate(len(x))
        self.transform.forward(x, spectrum)
        before = spectrum.to_complex()

        restored = np.empty(len(x))
        self.transform.inverse(spectrum, restored)
        np.testing.assert_array_equal(spectrum.to_complex(), before)

    def test_buffer_reuse(self):
        spectrum = allocate(8)
        restored = np.empty(8)
        for seed in range(3):
            x = np.random.default_rng(seed).standard_normal(8)
            self.transform.forward(x, spectrum)
            self.transform.inverse(spectrum, restored)
            np.testing.assert_allclose(restored, x, atol=self.tolerance)

    def test_undersized_spectrum_rejected(self):
        n = 8
        x = np.arange(n, dtype=np.float64)
        spectrum = allocate(self.transform.required_bins(n) - 1)
        spectrum.real[:] = 7.0

        with pytest.raises(InvalidArgument):
            self.transform.forward(x, spectrum)
        assert np.all(spectrum.real == 7.0)
        assert np.all(spectrum.imag == 0.0)

        restored = np.full(n, -3.0)
        with pytest.raises(InvalidArgument):
            self.transform.inverse(spectrum, restored)
        assert np.all(restored == -3.0)

    def test_empty_signal_rejected(self):
        with pytest.raises(InvalidArgument):
            self.transform.forward(np.array([]), allocate(4))

    def test_multidimensional_signal_rejected(self):
        with pytest.raises(InvalidArgument):
            self.transform.forward(np.ones((2, 4)), allocate(8))

    def test_complex_signal_rejected(self):
        spectrum = allocate(4)
        with pytest.raises(InvalidArgument, match="real-valued"):
            self.transform.forward(np.array([1 + 1j, 0, 0, 0]), spectrum)
        with pytest.raises(InvalidArgument, match="real-valued"):
            self.transform.forward([1j, 0.0, 0.0, 0.0], spectrum)
        assert np.all(spectrum.real == 0.0) and np.all(spectrum.imag == 0.0)

    def test_inverse_output_must_be_float_array(self):
        spectrum = allocate(4)
        with pytest.raises(InvalidArgument):
            self.transform.inverse(spectrum, [0.0] * 4)
        with pytest.raises(InvalidArgument):
            self.transform.inverse(spectrum, np.zeros(4, dtype=np.float32))

    def test_inverse_output_read_only_rejected(self):
        out = np.zeros(4)
        out.setflags(write=False)
        with pytest.raises(InvalidArgument):
            self.transform.inverse(allocate(4), out)


class TestNaiveDFT(TransformContract):

    def create_transform(self):
        return NaiveDFT()

    def test_required_bins(self):
        assert self.transform.required_bins(10) == 10


class TestSymmetricDFT(TransformContract):

    full_spectrum = False

    def create_transform(self):
        return SymmetricDFT()

    def test_required_bins(self):
        assert self.transform.required_bins(8) == 5
        assert self.transform.required_bins(9) == 5

    def test_half_spectrum_buffer(self):
        """A buffer of exactly N//2 + 1 bins is enough in both directions."""
        for n in (8, 9):
            x = np.random.default_rng(n).standard_normal(n)
            spectrum = allocate(n // 2 + 1)
            self.transform.forward(x, spectrum)

            np.testing.assert_allclose(spectrum.to_complex(), scipy_fft(x)[:n // 2 + 1], atol=1e-9)

            restored = np.empty(n)
            self.transform.inverse(spectrum, restored)
            np.testing.assert_allclose(restored, x, atol=1e-9)

    def test_forward_writes_only_half(self):
        n = 8
        spectrum = allocate(n)
        spectrum.real[:] = 99.0
        self.transform.forward(np.ones(n), spectrum)

        assert spectrum.get_real(0) == pytest.approx(8.0)
        np.testing.assert_array_equal(spectrum.real[n // 2 + 1:], 99.0)

    def test_output_length_selects_parity(self):
        """The same 3-bin half spectrum reconstructs a 4- or a 5-sample signal."""
        for n in (4, 5):
            x = np.random.default_rng(n).standard_normal(n)
            spectrum = allocate(3)
            self.transform.forward(x, spectrum)

            restored = np.empty(n)
            self.transform.inverse(spectrum, restored)
            np.testing.assert_allclose(restored, x, atol=1e-9)


class RadixTwoContract(TransformContract):
    """Extra checks for the power-of-two engines."""

    def test_odd_length_input(self):
        x = np.array([1.0, 2.0, 3.0])
        spectrum = allocate(len(x))

        with pytest.raises(InvalidArgument, match="power of two"):
            self.transform.forward(x, spectrum)
        assert np.all(spectrum.real == 0.0)

        bad_output = np.zeros(3)
        with pytest.raises(InvalidArgument, match="power of two"):
            self.transform.inverse(allocate(3), bad_output)

    @pytest.mark.parametrize("n", [6, 12, 100, 1000])
    def test_non_power_of_two_rejected(self, n):
        with pytest.raises(InvalidArgument):
            self.transform.forward(np.ones(n), allocate(n))

    def test_larger_buffer_accepted(self):
        x = np.arange(8, dtype=np.float64)
        spectrum = allocate(16)
        self.transform.forward(x, spectrum)
        np.testing.assert_allclose(spectrum.to_complex()[:8], scipy_fft(x), atol=1e-9)

        restored = np.empty(8)
        self.transform.inverse(spectrum, restored)
        np.testing.assert_allclose(restored, x, atol=1e-9)

    def test_large_input(self):
        n = 32768
        x = np.random.default_rng(32768).uniform(-50.0, 50.0, n)
        _, restored = self._round_trip(x)

        error = np.abs(restored - x)
        print(f"\n[{self.transform.name} Large] max error: {error.max():.2e}")
        assert error.max() < 1e-9

    @pytest.mark.parametrize("n", [64, 128, 256, 512, 1024])
    def test_power_of_2(self, n):
        x = np.random.default_rng(n).standard_normal(n)
        spectrum = allocate(n)
        self.transform.forward(x, spectrum)

        error = np.abs(spectrum.to_complex() - scipy_fft(x))
        assert error.max() < 1e-9, f"FFT failed for N={n}"


class TestRadixTwoFFT(RadixTwoContract):

    def create_transform(self):
        return RadixTwoFFT()


class TestParallelRadixTwoFFT(RadixTwoContract):

    def create_transform(self):
        return ParallelRadixTwoFFT(workers=4)

    def test_independent_engine(self):
        """The parallel engine is its own FourierTransform, not a RadixTwoFFT."""
        assert isinstance(self.transform, FourierTransform)
        assert not isinstance(self.transform, RadixTwoFFT)
        assert self.transform.required_bins(16) == 16


class TestCrossEngine:
    """All engines agree on their overlapping bins."""

    @pytest.mark.parametrize("n", [1, 2, 4, 8, 64, 512])
    def test_forward_agreement(self, n):
        x = np.random.default_rng(n).uniform(-1.0, 1.0, n)
        bins = n // 2 + 1

        spectra = {}
        with ParallelRadixTwoFFT(workers=2, parallel_threshold=1) as parallel:
            for engine in (NaiveDFT(), SymmetricDFT(), RadixTwoFFT(), parallel):
                spectrum = allocate(n)
                engine.forward(x, spectrum)
                spectra[engine.name] = spectrum.to_complex()[:bins]

        reference = spectra['naive']
        for name, values in spectra.items():
            error = np.abs(values - reference).max()
            assert error < 1e-9, f"{name} disagrees with naive for N={n}: {error:.2e}"

    def test_hermitian_symmetry(self):
        """Full spectra of real input satisfy X[N-k] = conj(X[k])."""
        n = 64
        x = np.random.default_rng(1).standard_normal(n)
        for engine in (NaiveDFT(), RadixTwoFFT()):
            spectrum = allocate(n)
            engine.forward(x, spectrum)
            z = spectrum.to_complex()
            np.testing.assert_allclose(z[1:][::-1], np.conj(z[1:]), atol=1e-9)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
