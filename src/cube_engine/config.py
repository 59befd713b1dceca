"""Solver configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Union

from .defs import MAX_THRESHOLD, YIELD_INTERVAL, TRANSPOSITION_LIMIT

ENV_PREFIX = "CUBE_ENGINE_"


@dataclass
class SolverConfig:
    """Solver settings."""
    max_threshold: int = MAX_THRESHOLD  #: IDA* threshold ceiling per phase
    yield_interval: int = YIELD_INTERVAL  #: node expansions between yield points
    transposition_limit: int = TRANSPOSITION_LIMIT  #: transposition table entries per iteration
    use_oracle_fallback: bool = True  #: ask the reference oracle when the two-phase search fails
    table_cache_dir: Union[str, None] = None  #: directory for ``.npz`` table files, ``None`` keeps tables in memory
    oracle_max_attempts: int = 5
    oracle_base_delay: float = 0.1  #: seconds, doubled after each failed attempt

    def __post_init__(self):
        for name in ("max_threshold", "yield_interval", "transposition_limit", "oracle_max_attempts"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be int, not {type(value).__name__}")
            if value <= 0:
                raise ValueError(f"{name} must be positive (got {value})")
        if not isinstance(self.use_oracle_fallback, bool):
            raise TypeError(f"use_oracle_fallback must be bool, not {type(self.use_oracle_fallback).__name__}")
        if self.table_cache_dir is not None and not isinstance(self.table_cache_dir, str):
            raise TypeError(f"table_cache_dir must be str or None, not {type(self.table_cache_dir).__name__}")
        if not isinstance(self.oracle_base_delay, (int, float)) or self.oracle_base_delay < 0:
            raise ValueError(f"oracle_base_delay must be a non-negative number (got {self.oracle_base_delay})")

    @classmethod
    def from_env(cls) -> SolverConfig:
        """Default configuration overridden by ``CUBE_ENGINE_<FIELD>`` environment variables."""
        kwargs = {}
        for field in fields(cls):
            value = os.environ.get(ENV_PREFIX + field.name.upper())
            if value is None:
                continue
            default = field.default
            if isinstance(default, bool):
                kwargs[field.name] = value.strip().lower() in ("1", "true", "yes", "on")
            elif isinstance(default, int):
                kwargs[field.name] = int(value)
            elif isinstance(default, float):
                kwargs[field.name] = float(value)
            else:
                kwargs[field.name] = value or None
        return cls(**kwargs)
