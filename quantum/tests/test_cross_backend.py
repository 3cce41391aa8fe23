# quantum/tests/test_cross_backend.py
import numpy as np
from quantum.engine import apply, max_threads
from quantum.gate import func_gate_unchecked, is_unitary
from quantum.gates import diffusion, hadamard
from quantum.state import QReg

def max_abs_diff(a, b):
    return float(np.max(np.abs(a - b)))

def random_unitary(rng, bits):
    w = 1 << bits
    z = rng.normal(size=(w, w)) + 1j * rng.normal(size=(w, w))
    q, r = np.linalg.qr(z)
    return q * (np.diag(r) / np.abs(np.diag(r)))

def random_state(rng, n):
    psi = rng.normal(size=1 << n) + 1j * rng.normal(size=1 << n)
    return QReg(n, psi / np.linalg.norm(psi))

def matrix_gate(U, bits):
    return func_gate_unchecked(lambda r, c: U[r, c], bits)

def test_serial_vs_numba_small():
    rng = np.random.default_rng(7)
    st = random_state(rng, 4)
    s, t = st.copy(), st.copy()
    for g, targets in [(hadamard(2), [3, 1]), (diffusion(1), [2]), (hadamard(3), [0, 2, 3])]:
        apply(g, s, targets, backend="serial")
        apply(g, t, targets, backend="numba", num_threads=min(4, max_threads()))
    assert max_abs_diff(s.as_numpy(), t.as_numpy()) < 1e-12

def test_random_gates_match():
    rng = np.random.default_rng(123)
    n = 5
    for trial in range(10):
        k = int(rng.integers(1, 4))
        targets = [int(x) for x in rng.permutation(n)[:k]]
        g = matrix_gate(random_unitary(rng, k), k)
        st = random_state(rng, n)
        s, t = st.copy(), st.copy()
        apply(g, s, targets, backend="serial")
        apply(g, t, targets, backend="numba")
        assert np.allclose(s.as_numpy(), t.as_numpy(), atol=1e-10, rtol=0)
        # true unitaries keep the norm
        assert abs(t.norm2() - 1.0) < 1e-10

def test_unitarity_check_agrees():
    rng = np.random.default_rng(5)
    candidates = [hadamard(3), diffusion(2),
                  matrix_gate(np.array([[1, 1], [0, 1]]), 1),
                  matrix_gate(random_unitary(rng, 2), 2)]
    for g in candidates:
        assert is_unitary(g, backend="serial") == is_unitary(g, backend="numba")
