"""
Engine configuration.

Configuration is a plain YAML file, e.g. configs/default.yaml:

    transform:
      engine: parallel_fft
      workers: 4
      parallel_threshold: 4096
      shutdown_grace_s: 1.0
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .errors import InvalidArgument
from .parallel import DEFAULT_PARALLEL_THRESHOLD, DEFAULT_SHUTDOWN_GRACE_S


@dataclass
class TransformConfig:
    """Settings used to build a transform engine."""
    engine: str = "fft"
    # Pool settings, only read by the parallel engine
    workers: Optional[int] = None  # None -> os.cpu_count()
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    shutdown_grace_s: float = DEFAULT_SHUTDOWN_GRACE_S

    def __post_init__(self):
        if not isinstance(self.engine, str) or not self.engine:
            raise InvalidArgument(f"engine must be a non-empty string, got {self.engine!r}")
        if self.workers is not None and (
            isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1
        ):
            raise InvalidArgument(f"workers must be a positive integer or null, got {self.workers!r}")
        if isinstance(self.parallel_threshold, bool) or not isinstance(self.parallel_threshold, int) \
                or self.parallel_threshold < 1:
            raise InvalidArgument(
                f"parallel_threshold must be a positive integer, got {self.parallel_threshold!r}"
            )
        if not isinstance(self.shutdown_grace_s, (int, float)) or self.shutdown_grace_s < 0:
            raise InvalidArgument(f"shutdown_grace_s must be >= 0, got {self.shutdown_grace_s!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'TransformConfig':
        """
        Build a config from a dict, accepting an optional top-level 'transform' section.

        Unknown keys raise InvalidArgument rather than being silently ignored.
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidArgument(f"Config must be a mapping, got {type(data).__name__}")

        section = data.get('transform', data)
        if not isinstance(section, dict):
            raise InvalidArgument("'transform' section must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise InvalidArgument(f"Unknown config keys: {', '.join(unknown)}")

        return cls(**section)

    def with_overrides(self, **changes) -> 'TransformConfig':
        """Return a validated copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise InvalidArgument(f"Unknown config keys: {', '.join(unknown)}")
        return replace(self, **changes)

    def to_dict(self) -> Dict:
        return asdict(self)


def load_config(config_path: Union[str, Path]) -> TransformConfig:
    """Load configuration from a YAML file."""
    with open(config_path, 'r') as f:
        return TransformConfig.from_dict(yaml.safe_load(f))
