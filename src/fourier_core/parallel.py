"""
Multi-threaded radix-2 Cooley-Tukey FFT.

Same algorithm as RadixTwoFFT. Large stages are split into contiguous ranges
of butterflies and run on a thread pool owned by the engine; the numba
kernels release the GIL, so the workers execute in parallel.

Usage:
    >>> with ParallelRadixTwoFFT(workers=4) as fft:
    ...     fft.forward(signal, spectrum)
"""

import math
import os
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from contextlib import contextmanager
from typing import List, Optional

import numpy as np

from .base import FourierTransform, check_power_of_two
from .buffer import SpectrumBuffer
from .errors import InvalidArgument
from .fft import _bit_reverse_permute, _butterfly_range
from .utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PARALLEL_THRESHOLD = 4096
DEFAULT_SHUTDOWN_GRACE_S = 1.0


class ParallelRadixTwoFFT(FourierTransform):
    """
    Radix-2 FFT with stage-parallel butterfly execution.

    Computes the same full N-bin spectrum as RadixTwoFFT and shares its numba
    kernels, but is a separate engine; N must be a power of two.

    Stages with fewer than ``parallel_threshold`` butterflies (N/2) run on the
    calling thread, where dispatch overhead would otherwise dominate. Stages
    run strictly one after another: every worker of a stage finishes before
    the next stage is dispatched.

    The transform is computed on scratch arrays and copied into the caller's
    buffer only once every stage has succeeded. If a worker raises, the rest
    of the stage is cancelled and the exception propagates with the caller's
    buffers untouched.

    Only one transform may run per instance at a time; a concurrent call
    raises RuntimeError. Release the pool with :meth:`close` or a ``with``
    block.

    Args:
        workers: Number of worker threads (default: os.cpu_count())
        parallel_threshold: Minimum butterflies per stage for fan-out
        shutdown_grace_s: Seconds close() waits for in-flight tasks
    """

    name = "parallel_fft"

    def __init__(
        self,
        workers: Optional[int] = None,
        parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD,
        shutdown_grace_s: float = DEFAULT_SHUTDOWN_GRACE_S
    ):
        if workers is None:
            workers = os.cpu_count() or 1
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise InvalidArgument(f"workers must be a positive integer, got {workers!r}")
        if isinstance(parallel_threshold, bool) or not isinstance(parallel_threshold, int) \
                or parallel_threshold < 1:
            raise InvalidArgument(
                f"parallel_threshold must be a positive integer, got {parallel_threshold!r}"
            )
        if shutdown_grace_s < 0:
            raise InvalidArgument(f"shutdown_grace_s must be >= 0, got {shutdown_grace_s!r}")

        self._workers = workers
        self._threshold = parallel_threshold
        self._grace = float(shutdown_grace_s)

        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fft-worker")
        self._busy = threading.Lock()
        self._pending: List = []
        self._closed = False

        logger.debug(
            f"Started FFT worker pool: workers={workers}, threshold={parallel_threshold}"
        )

    @property
    def workers(self) -> int:
        return self._workers

    @property
    def parallel_threshold(self) -> int:
        return self._threshold

    @property
    def closed(self) -> bool:
        return self._closed

    def required_bins(self, n: int) -> int:
        return n

    def _check_length(self, n: int) -> None:
        check_power_of_two(n, self.__class__.__name__)

    def forward(self, signal, spectrum: SpectrumBuffer) -> None:
        with self._exclusive():
            x = self._validate_forward(signal, spectrum)
            n = x.shape[0]

            real = x.copy()
            imag = np.zeros(n, dtype=np.float64)
            self._process_in_place(real, imag, invert=False)

            spectrum.real[:n] = real
            spectrum.imag[:n] = imag

    def inverse(self, spectrum: SpectrumBuffer, signal: np.ndarray) -> None:
        with self._exclusive():
            n = self._validate_inverse(spectrum, signal)

            real = spectrum.real[:n].copy()
            imag = spectrum.imag[:n].copy()
            self._process_in_place(real, imag, invert=True)

            np.divide(real, n, out=signal)

    @contextmanager
    def _exclusive(self):
        if self._closed:
            raise RuntimeError(f"{self.__class__.__name__} has been closed")
        if not self._busy.acquire(blocking=False):
            raise RuntimeError(
                f"{self.__class__.__name__} does not support concurrent transforms on one instance"
            )
        try:
            yield
        finally:
            self._busy.release()

    def _process_in_place(self, real: np.ndarray, imag: np.ndarray, invert: bool) -> None:
        n = real.shape[0]
        sign = 1.0 if invert else -1.0
        total = n // 2

        _bit_reverse_permute(real, imag)

        length = 2
        while length <= n:
            angle_step = sign * 2.0 * math.pi / length

            if total < self._threshold or self._workers == 1:
                _butterfly_range(real, imag, length, angle_step, 0, total)
            else:
                self._run_stage(real, imag, length, angle_step, total)

            length <<= 1

    def _run_stage(self, real: np.ndarray, imag: np.ndarray, length: int,
                   angle_step: float, total: int) -> None:
        """Fan one stage out over the pool and block until all of it is done."""
        chunks = min(self._workers, total)
        per_chunk = total // chunks

        futures = []
        self._pending = futures
        try:
            for t in range(chunks):
                start = t * per_chunk
                end = total if t == chunks - 1 else start + per_chunk
                futures.append(
                    self._executor.submit(_butterfly_range, real, imag, length, angle_step, start, end)
                )

            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
            if not_done:
                # A chunk failed: drop what has not started, let the rest drain
                for f in not_done:
                    f.cancel()
                wait(not_done)

            for f in futures:
                if f.cancelled():
                    continue
                exc = f.exception()
                if exc is not None:
                    raise exc
            if any(f.cancelled() for f in futures):
                raise RuntimeError("FFT stage was cancelled before completion")
        finally:
            # Never leave a running chunk behind on the scratch arrays
            wait(futures)
            self._pending = []

    def close(self, timeout: Optional[float] = None) -> None:
        """
        Shut down the worker pool.

        Queued tasks are cancelled. Running tasks get up to ``timeout`` seconds
        (default: the configured grace period) to finish; anything still
        running afterwards is abandoned and its results discarded. Calling
        close() again is a no-op.
        """
        if self._closed:
            return
        self._closed = True

        grace = self._grace if timeout is None else timeout
        pending = list(self._pending)

        logger.debug(f"Shutting down FFT worker pool ({len(pending)} tasks in flight)")
        self._executor.shutdown(wait=False, cancel_futures=True)

        if pending:
            _, not_done = wait(pending, timeout=grace)
            if not_done:
                logger.warning(
                    f"FFT worker pool did not drain within {grace:.2f}s; "
                    f"abandoning {len(not_done)} task(s)"
                )
                for f in not_done:
                    f.cancel()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        # Partially constructed instances have no executor
        if getattr(self, '_executor', None) is not None and not getattr(self, '_closed', True):
            self._closed = True
            self._executor.shutdown(wait=False, cancel_futures=True)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(workers={self._workers}, "
            f"parallel_threshold={self._threshold}, closed={self._closed})"
        )
