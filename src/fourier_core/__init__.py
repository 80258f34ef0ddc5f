"""
fourier_core - Hand-written DFT and FFT engines

Converts real-valued signals to and from a complex spectrum with four
interchangeable engines:

    - NaiveDFT: direct O(N^2) DFT over all N bins, any N
    - SymmetricDFT: O(N^2) DFT over bins [0, N/2], any N
    - RadixTwoFFT: iterative Cooley-Tukey FFT, N a power of two
    - ParallelRadixTwoFFT: RadixTwoFFT with stage-parallel butterflies on an owned thread pool

Spectra live in a SpectrumBuffer (split real/imag arrays) allocated by the
caller and reused across calls.
"""

from .buffer import SpectrumBuffer, allocate
from .errors import FourierError, InvalidArgument
from .base import FourierTransform, is_power_of_two
from .dft import NaiveDFT, SymmetricDFT
from .fft import RadixTwoFFT
from .parallel import ParallelRadixTwoFFT
from .config import TransformConfig, load_config
from .factory import create_transform, available_transforms

__all__ = [
    # Buffers
    'SpectrumBuffer',
    'allocate',
    # Errors
    'FourierError',
    'InvalidArgument',
    # Engines
    'FourierTransform',
    'NaiveDFT',
    'SymmetricDFT',
    'RadixTwoFFT',
    'ParallelRadixTwoFFT',
    'is_power_of_two',
    # Construction
    'TransformConfig',
    'load_config',
    'create_transform',
    'available_transforms',
]

__version__ = '1.0.0'
