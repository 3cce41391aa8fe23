# quantum/engine.py
"""Tensor-contraction engine: applies a gate to chosen qubits of a register.

For an n-qubit register and a k-qubit gate there are ``2**(n-k)``
applications, one per assignment of the non-target qubits. Within an
application the target qubits range over the gate's rows and columns, and
the non-target qubits are filled in increasing position order from the
bits of the application number. Results are written to a fresh array which
replaces the register's amplitudes once every application has finished.
"""
import numbers
from typing import TYPE_CHECKING, Optional, Sequence

from . import settings
from .errors import InvalidTarget
from .logging import get_logger

if TYPE_CHECKING:
    from .gate import Gate
    from .state import QReg

logger = get_logger(__name__)

BACKENDS = ("serial", "numba")


def _kernels(backend: Optional[str]):
    name = settings.DEFAULT_BACKEND if backend is None else backend
    if name == "serial":
        from . import apply_serial as kernels
    elif name == "numba":
        try:
            from . import apply_numba as kernels
        except ImportError as e:
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
    else:
        raise NotImplementedError(f"Unknown backend: {name}")
    return kernels


def set_threads(n: int):
    _kernels("numba").set_threads(int(n))


def get_threads() -> int:
    return _kernels("numba").get_threads()


def max_threads() -> int:
    """Size of numba's thread pool; set_threads accepts at most this many."""
    return _kernels("numba").max_threads()


def _validate_targets(gate: "Gate", n: int, targets: Sequence[int]) -> tuple:
    targets = tuple(targets)
    if len(targets) != gate.bits:
        raise InvalidTarget(
            f"{gate.bits}-qubit gate needs {gate.bits} targets, got {len(targets)}")
    for t in targets:
        if not isinstance(t, numbers.Integral) or not 0 <= t < n:
            raise InvalidTarget(f"{t} is not a valid target")
    if len(set(targets)) != len(targets):
        raise InvalidTarget(f"Targets must be distinct, got {targets}")
    return tuple(int(t) for t in targets)


def apply(gate: "Gate", qreg: "QReg", targets: Sequence[int],
          backend: Optional[str] = None, num_threads: Optional[int] = None):
    """Apply ``gate`` to the qubits ``targets`` of ``qreg`` in place.

    Bit i of a gate row or column corresponds to qubit ``targets[i]``.
    Raises ``InvalidTarget`` without touching the register if the targets
    do not fit.
    """
    targets = _validate_targets(gate, qreg.n, targets)
    kernels = _kernels(backend)

    if num_threads is None:
        num_threads = settings.num_threads()
    if num_threads is not None and hasattr(kernels, "set_threads"):
        kernels.set_threads(int(num_threads))

    logger.debug("apply %d-qubit gate to %s of a %d-qubit register (%d applications)",
                 gate.bits, list(targets), qreg.n, 1 << (qreg.n - len(targets)))
    new_psi = kernels.contract(qreg.psi, gate, targets, qreg.n)
    qreg.psi = new_psi


def apply_range(gate: "Gate", qreg: "QReg", start: int, **kw):
    """Apply ``gate`` to the contiguous qubits ``start .. start+bits-1``."""
    apply(gate, qreg, range(start, start + gate.bits), **kw)


def apply_reg(gate: "Gate", qreg: "QReg", **kw):
    """Apply ``gate`` to the lowest ``gate.bits`` qubits."""
    apply_range(gate, qreg, 0, **kw)


def is_unitary(gate: "Gate", backend: Optional[str] = None) -> bool:
    return _kernels(backend).gram_is_unitary(gate, settings.UNITARY_TOL)
