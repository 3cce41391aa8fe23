# quantum/gate.py
"""Gates as matrix-element accessors.

A gate is anything exposing ``bits``, ``width``, ``element(row, col)`` and a
dense ``matrix()``. Three immutable variants cover the ways gates are built:
from a formula, from an explicit array, and from a classical permutation.
Gates own no register and can be applied to any number of them.
"""
import math
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from . import engine
from .errors import InvalidArgument, NonUnitaryGate
from .logging import get_logger

logger = get_logger(__name__)

ElementFn = Callable[[int, int], complex]
ClassicalFn = Callable[[int], int]


@runtime_checkable
class Gate(Protocol):
    bits: int

    @property
    def width(self) -> int: ...

    def element(self, row: int, col: int) -> complex: ...

    def matrix(self) -> np.ndarray: ...


def check_bits(bits) -> int:
    if not isinstance(bits, (int, np.integer)) or bits < 1:
        raise InvalidArgument(f"A gate acts on at least one qubit, got bits={bits!r}")
    return int(bits)


def _frozen(m: np.ndarray) -> np.ndarray:
    m.setflags(write=False)
    return m


@dataclass(frozen=True)
class FuncGate:
    """Formula-backed gate: ``element(row, col) = f(row, col)``."""
    f: ElementFn
    bits: int

    @property
    def width(self) -> int:
        return 1 << self.bits

    def element(self, row: int, col: int) -> complex:
        return complex(self.f(row, col))

    @cached_property
    def _dense(self) -> np.ndarray:
        w = self.width
        m = np.empty((w, w), dtype=np.complex128)
        for row in range(w):
            for col in range(w):
                m[row, col] = self.f(row, col)
        return _frozen(m)

    def matrix(self) -> np.ndarray:
        return self._dense


@dataclass(frozen=True, eq=False)
class ArrayGate:
    """Dense gate wrapping an explicit square matrix."""
    array: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "array", _frozen(np.array(self.array, dtype=np.complex128)))

    @property
    def bits(self) -> int:
        return self.width.bit_length() - 1

    @property
    def width(self) -> int:
        return self.array.shape[0]

    def element(self, row: int, col: int) -> complex:
        return complex(self.array[row, col])

    def matrix(self) -> np.ndarray:
        return self.array


@dataclass(frozen=True)
class PermutationGate:
    """Classical function ``f`` lifted to a permutation matrix.

    ``element(row, col)`` is 1 exactly when ``f(col) == row``.
    """
    f: ClassicalFn
    bits: int

    @property
    def width(self) -> int:
        return 1 << self.bits

    @cached_property
    def table(self) -> tuple:
        return tuple(int(self.f(col)) for col in range(self.width))

    def element(self, row: int, col: int) -> complex:
        return 1 + 0j if self.table[col] == row else 0j

    @cached_property
    def _dense(self) -> np.ndarray:
        w = self.width
        m = np.zeros((w, w), dtype=np.complex128)
        for col, row in enumerate(self.table):
            if 0 <= row < w:
                m[row, col] = 1.0
        return _frozen(m)

    def matrix(self) -> np.ndarray:
        return self._dense


# ------------------------- unitarity -------------------------

def is_unitary(gate: Gate, backend: Optional[str] = None) -> bool:
    """Gram-matrix test of ``gate`` against the identity.

    Entry (row, col) is ``sum_i element(row, i) * element(i, col)``, compared
    by magnitude with tolerance ``settings.UNITARY_TOL``. The product uses
    ``element`` itself, not its conjugate transpose; for the real
    symmetric gates of the standard library the two agree. Complex
    unitaries such as ``[[1, i], [i, 1]] / sqrt(2)`` are rejected, and so are
    permutations that are not their own inverse, e.g. ``(x + 1) % 4``.
    """
    return engine.is_unitary(gate, backend=backend)


def checked(gate: Gate, backend: Optional[str] = None) -> Gate:
    if not is_unitary(gate, backend=backend):
        logger.warning("rejecting non-unitary %d-qubit %s", gate.bits, type(gate).__name__)
        raise NonUnitaryGate(f"Gate is not unitary ({type(gate).__name__}, bits={gate.bits})")
    return gate


# ------------------------- constructors -------------------------

def func_gate_unchecked(f: ElementFn, bits: int) -> FuncGate:
    """Formula gate without the unitarity check; the caller guarantees it."""
    return FuncGate(f, check_bits(bits))


def func_gate(f: ElementFn, bits: int) -> FuncGate:
    return checked(func_gate_unchecked(f, bits))


def array_gate(values) -> ArrayGate:
    """Checked gate from ``width*width`` values, flat (row-major) or square."""
    arr = np.asarray(values, dtype=np.complex128)
    if arr.ndim == 1:
        width = math.isqrt(arr.shape[0])
        if width * width != arr.shape[0]:
            raise InvalidArgument(f"{arr.shape[0]} values do not form a square matrix")
        arr = arr.reshape(width, width)
    elif arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise InvalidArgument(f"Expected a square matrix, got shape {arr.shape}")
    width = arr.shape[0]
    if width < 2 or width & (width - 1):
        raise InvalidArgument(f"Matrix width must be a power of two >= 2, got {width}")
    return checked(ArrayGate(arr))


def real_array_gate(values: Sequence[float]) -> ArrayGate:
    return array_gate(np.asarray(values, dtype=np.float64))


def classical_gate(f: ClassicalFn, bits: int) -> PermutationGate:
    """Reversible classical function as a checked permutation gate.

    ``f`` must be an involution on ``range(2**bits)`` (``f(f(x)) == x``),
    otherwise the Gram test fails with ``NonUnitaryGate``. XOR oracles such
    as ``x ^ g(y)`` qualify.
    """
    return checked(PermutationGate(f, check_bits(bits)))


# ------------------------- text dump -------------------------

def format_gate(gate: Gate) -> str:
    """Matrix rendered as right-aligned ``%+f`` columns, one row per line."""
    def cell(z: complex) -> str:
        if z.imag:
            return "%+f%+fi" % (z.real, z.imag)
        return "%+f" % z.real

    w = gate.width
    cells = [[cell(gate.element(row, col)) for col in range(w)] for row in range(w)]
    sizes = []
    for col in range(w):
        size = max(len(cells[row][col]) for row in range(w))
        sizes.append(size if col == 0 else size + 1)
    return "\n".join("".join(cells[row][col].rjust(sizes[col]) for col in range(w))
                     for row in range(w))
