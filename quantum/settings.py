# quantum/settings.py
"""Defaults for the simulator, overridable through the environment.

Explicit keyword arguments always win over anything set here.
"""
import os
import time
from typing import Optional

import numpy as np

_BACKEND_ENV_VAR = "QREG_BACKEND"
_THREADS_ENV_VAR = "QREG_NUM_THREADS"
_LOG_LEVEL_ENV_VAR = "QREG_LOG_LEVEL"

DEFAULT_BACKEND = os.getenv(_BACKEND_ENV_VAR, "numba").lower()
DEFAULT_DTYPE = np.complex128
DEFAULT_LOG_LEVEL = os.getenv(_LOG_LEVEL_ENV_VAR, "WARNING").upper()

# Magnitude tolerance of the Gram-matrix check.
UNITARY_TOL = 1e-10
NORM_TOL = 1e-8

_rng: Optional[np.random.Generator] = None


def num_threads() -> Optional[int]:
    """Thread count requested through QREG_NUM_THREADS, or None."""
    raw = os.getenv(_THREADS_ENV_VAR)
    if raw is None or raw.strip() == "":
        return None
    n = int(raw)
    if n < 1:
        raise ValueError(f"{_THREADS_ENV_VAR} must be >= 1, got {n}")
    return n


def make_rng(seed=None) -> np.random.Generator:
    return np.random.default_rng(seed)


def default_rng() -> np.random.Generator:
    """Process-wide generator, seeded once from the high-resolution clock."""
    global _rng
    if _rng is None:
        _rng = make_rng(time.perf_counter_ns())
    return _rng
