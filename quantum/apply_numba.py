# quantum/apply_numba.py
import numpy as np
from numba import config, njit, prange, set_num_threads, get_num_threads

# ---------- low-level kernels (Numba JIT) ----------

@njit(parallel=True, fastmath=True)
def _contract_kernel(old, new, U, offsets, free_masks):
    width = U.shape[0]
    nfree = free_masks.shape[0]
    num_apps = 1 << nfree
    # one task per assignment of the non-target qubits; each writes its own
    # 2**k destination indices and only reads `old`
    for a in prange(num_apps):
        app = np.int64(a)
        base = 0
        for j in range(nfree):
            if (app >> j) & 1:
                base += free_masks[j]
        for row in range(width):
            acc = 0j
            for col in range(width):
                acc += U[row, col] * old[base + offsets[col]]
            new[base + offsets[row]] = acc

@njit(parallel=True)
def _gram_kernel(M, tol, ok):
    w = M.shape[0]
    for r in prange(w):
        row = np.int64(r)
        good = True
        for col in range(w):
            acc = 0j
            for i in range(w):
                acc += M[row, i] * M[i, col]
            expect = 1.0 if row == col else 0.0
            if not abs(abs(acc) - expect) < tol:
                good = False
                break
        ok[row] = good

# ---------- index maps ----------

def target_offsets(targets) -> np.ndarray:
    """offsets[v]: the bits of v scattered onto the target positions."""
    v = np.arange(1 << len(targets), dtype=np.int64)
    offs = np.zeros_like(v)
    for i, t in enumerate(targets):
        offs |= ((v >> i) & 1) << np.int64(t)
    return offs

def free_bits(targets, n: int) -> np.ndarray:
    """Masks of the non-target qubits in increasing position order."""
    taken = set(targets)
    return np.array([1 << p for p in range(n) if p not in taken], dtype=np.int64)

# ---------- user-facing helpers ----------

def set_threads(n: int):
    set_num_threads(n)

def get_threads() -> int:
    return get_num_threads()

def contract(psi: np.ndarray, gate, targets, n: int) -> np.ndarray:
    U = np.ascontiguousarray(gate.matrix(), dtype=psi.dtype)
    new_psi = np.zeros_like(psi)
    _contract_kernel(psi, new_psi, U, target_offsets(targets), free_bits(targets, n))
    return new_psi

def gram_is_unitary(gate, tol: float) -> bool:
    M = np.ascontiguousarray(gate.matrix(), dtype=np.complex128)
    ok = np.zeros(M.shape[0], dtype=np.bool_)
    _gram_kernel(M, tol, ok)
    return bool(ok.all())

def max_threads() -> int:
    return config.NUMBA_NUM_THREADS
