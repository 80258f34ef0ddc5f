"""
Engine registry.

An engine is chosen once, by name, when it is built:

    >>> fft = create_transform("fft")
    >>> pfft = create_transform("parallel_fft", workers=4)
"""

from typing import Dict, List, Optional, Type

from .base import FourierTransform
from .config import TransformConfig
from .dft import NaiveDFT, SymmetricDFT
from .errors import InvalidArgument
from .fft import RadixTwoFFT
from .parallel import ParallelRadixTwoFFT

_REGISTRY: Dict[str, Type[FourierTransform]] = {
    'naive': NaiveDFT,
    'symmetric': SymmetricDFT,
    'fft': RadixTwoFFT,
    'parallel_fft': ParallelRadixTwoFFT,
}

_ALIASES = {
    'naive_dft': 'naive',
    'dft': 'symmetric',
    'symmetric_dft': 'symmetric',
    'radix2': 'fft',
    'radix2_fft': 'fft',
    'parallel': 'parallel_fft',
    'parallel_radix2': 'parallel_fft',
}


def available_transforms() -> List[str]:
    return list(_REGISTRY)


def resolve_name(name: str) -> str:
    key = name.strip().lower().replace('-', '_')
    key = _ALIASES.get(key, key)
    if key not in _REGISTRY:
        raise InvalidArgument(
            f"Unknown transform '{name}'. Available: {', '.join(available_transforms())}"
        )
    return key


def create_transform(
    name: Optional[str] = None,
    config: Optional[TransformConfig] = None,
    **overrides
) -> FourierTransform:
    """
    Create a transform engine.

    Args:
        name: Engine name (defaults to config.engine)
        config: Engine configuration (defaults to TransformConfig())
        **overrides: Config fields to override, e.g. workers=2

    Returns:
        A new engine. Parallel engines own a thread pool; close() them when done.
    """
    if config is None:
        config = TransformConfig()
    if overrides:
        config = config.with_overrides(**overrides)

    key = resolve_name(name if name is not None else config.engine)
    cls = _REGISTRY[key]

    if cls is ParallelRadixTwoFFT:
        return ParallelRadixTwoFFT(
            workers=config.workers,
            parallel_threshold=config.parallel_threshold,
            shutdown_grace_s=config.shutdown_grace_s,
        )
    return cls()
