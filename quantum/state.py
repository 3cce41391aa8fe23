# quantum/state.py
import math
import numbers
from dataclasses import dataclass
from typing import Optional

import numpy as np

from . import settings
from .errors import InvalidArgument, InvalidTarget
from .logging import get_logger

logger = get_logger(__name__)


def _is_int(x) -> bool:
    return isinstance(x, numbers.Integral)


@dataclass
class QReg:
    """Dense state vector of an n-qubit register.

    Bit i of a basis index is the classical value of qubit i (little-endian,
    qubit 0 is the LSB).
    """
    n: int
    psi: np.ndarray  # shape (2**n,), complex

    @staticmethod
    def create(width: int, *values, dtype=settings.DEFAULT_DTYPE) -> "QReg":
        """Register in a single basis state.

        ``create(w)`` is |0>, ``create(w, d)`` is |d>, and ``create(w, b1, ..., bw)``
        reads ``w`` binary digits high-bit-first.
        """
        if not _is_int(width) or width < 0:
            raise InvalidArgument(f"width must be a non-negative integer, got {width!r}")
        N = 1 << width

        if len(values) == 0:
            index = 0
        elif len(values) == 1 and _is_int(values[0]) and width != 1:
            index = int(values[0])
            if not 0 <= index < N:
                raise InvalidArgument(
                    f"Value of {index} is out of range for a register of width {width}")
        elif len(values) == width:
            index = 0
            for digit in values:
                if not _is_int(digit) or digit not in (0, 1):
                    raise InvalidArgument(f"Binary digit should be 0 or 1, got {digit!r}")
                index = (index << 1) | int(digit)
        else:
            raise InvalidArgument(
                f"Expected no value, one integer or {width} binary digits, got {len(values)} values")

        psi = np.zeros(N, dtype=dtype)
        psi[index] = 1.0 + 0.0j
        return QReg(n=width, psi=psi)

    @staticmethod
    def zero(n: int, dtype=settings.DEFAULT_DTYPE) -> "QReg":
        return QReg.create(n, dtype=dtype)

    @property
    def dtype(self):
        return self.psi.dtype

    def __len__(self) -> int:
        return self.psi.shape[0]

    # ------------------------- probabilities -------------------------

    def _check_qubit(self, index: int):
        if not _is_int(index) or not 0 <= index < self.n:
            raise InvalidTarget(f"{index} is not a valid qubit of a {self.n}-qubit register")

    def _bit_view(self, index: int) -> np.ndarray:
        # (right, 2, left): the middle axis is qubit `index`
        left = 1 << index
        right = 1 << (self.n - index - 1)
        return self.psi.reshape(right, 2, left)

    def _check_value(self, value) -> int:
        # bools count as 0 and 1, but must not reach numpy as a mask index
        if isinstance(value, np.bool_):
            value = bool(value)
        if not _is_int(value) or value not in (0, 1):
            raise InvalidArgument(f"Value {value!r} should be either 0 or 1")
        return int(value)

    def probabilities(self) -> np.ndarray:
        return np.abs(self.psi) ** 2

    def state_prob(self, index: int) -> float:
        """Born-rule probability of observing basis state ``index``."""
        if not _is_int(index) or not 0 <= index < len(self):
            raise InvalidTarget(f"{index} is not a basis state of a {self.n}-qubit register")
        a = self.psi[index]
        return float(a.real * a.real + a.imag * a.imag)

    def bit_prob(self, index: int, value: int) -> float:
        """Probability that qubit ``index`` reads ``value``."""
        self._check_qubit(index)
        value = self._check_value(value)
        side = self._bit_view(index)[:, value, :]
        return float(np.sum(side.real ** 2 + side.imag ** 2))

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=None):
        tol = settings.NORM_TOL if tol is None else tol
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")

    # ------------------------- collapse -------------------------

    def set_bit(self, index: int, value: int):
        """Force qubit ``index`` to ``value``.

        With non-zero probability this is a projective collapse followed by
        renormalisation. With zero probability the amplitudes of the other
        side are moved across instead, which flips a deterministic qubit.
        """
        value = self._check_value(value)
        self._check_qubit(index)

        view = self._bit_view(index)
        p = self.bit_prob(index, value)
        if p > 0:
            logger.debug("collapse qubit %d to %d (p=%g)", index, value, p)
            view[:, value, :] *= 1.0 / math.sqrt(p)
            view[:, 1 - value, :] = 0
        else:
            logger.debug("flip qubit %d to %d", index, value)
            view[:, value, :] += view[:, 1 - value, :]
            view[:, 1 - value, :] = 0

    # ------------------------- measurement -------------------------

    def measure_bit_preserve(self, index: int, rng: Optional[np.random.Generator] = None) -> int:
        """Sample qubit ``index`` without collapsing the register."""
        rng = settings.default_rng() if rng is None else rng
        p0 = self.bit_prob(index, 0)
        if rng.random() < p0:
            return 0
        return 1

    def measure_bit(self, index: int, rng: Optional[np.random.Generator] = None) -> int:
        b = self.measure_bit_preserve(index, rng)
        self.set_bit(index, b)
        return b

    def measure_preserve(self, rng: Optional[np.random.Generator] = None) -> int:
        """Sample a basis state without collapsing the register."""
        rng = settings.default_rng() if rng is None else rng
        r = rng.random()
        cumulative = np.cumsum(self.probabilities())
        # first index whose running sum exceeds r
        i = int(np.searchsorted(cumulative, r, side="right"))
        return min(i, len(self) - 1)

    def measure(self, rng: Optional[np.random.Generator] = None) -> int:
        value = self.measure_preserve(rng)
        amp = 1.0 if self.psi[value].real > 0 else -1.0
        self.psi[:] = 0
        self.psi[value] = amp
        return value

    def copy(self) -> "QReg":
        return QReg(self.n, self.psi.copy())

    def as_numpy(self) -> np.ndarray:
        return self.psi

    # ------------------------- text dump -------------------------

    def format_state(self, index: int) -> str:
        amp = complex(self.psi[index])
        largest = len(self) - 1
        pad = int(math.floor(math.log10(largest))) + 1 if largest > 0 else 1
        digits = format(index, f"0{self.n}b") if self.n > 0 else ""
        return (f"{amp.real:+f}{amp.imag:+f}i {self.state_prob(index):f}"
                f"|({index:{pad}d}){digits}>")

    def dump(self) -> str:
        return "\n".join(self.format_state(i) for i in range(len(self)))

    def dump_nonzero(self) -> str:
        return "\n".join(self.format_state(int(i)) for i in np.flatnonzero(self.psi))

    def __str__(self) -> str:
        return self.dump_nonzero()
