# quantum/tests/test_algorithms.py
"""End-to-end runs of the small algorithms the register is meant to host."""
import math
from collections import Counter

import pytest
from quantum.engine import apply_range, apply_reg
from quantum.gate import classical_gate, real_array_gate
from quantum.gates import apply_H_range, apply_H_reg, diffusion, hadamard
from quantum.settings import make_rng
from quantum.state import QReg

def parity(x):
    return bin(x).count("1") & 1

def deutsch_jozsa(oracle, rng):
    """Qubit 0 is the output ancilla, qubits 1-2 the input; returns the input readout."""
    qreg = QReg.create(3, 1)
    apply_H_reg(qreg)
    apply_reg(oracle, qreg)
    apply_H_range(qreg, 1, 3)
    return qreg.measure(rng) >> 1

def test_hadamard_gives_uniform_distribution():
    qreg = QReg.zero(3)
    apply_H_reg(qreg)
    rng = make_rng(2024)
    trials = 8000
    counts = Counter(qreg.measure_preserve(rng) for _ in range(trials))
    assert set(counts) == set(range(8))
    for outcome in range(8):
        # expected 1000, sd ~ 30
        assert abs(counts[outcome] - trials / 8) < 150

def test_collapsing_measurements_are_uniform():
    rng = make_rng(77)
    counts = Counter()
    for _ in range(800):
        qreg = QReg.zero(3)
        apply_H_reg(qreg)
        counts[qreg.measure(rng)] += 1
    assert all(abs(counts[o] - 100) < 50 for o in range(8))

@pytest.mark.parametrize("constant", [0, 1])
def test_deutsch_jozsa_constant(constant):
    oracle = classical_gate(lambda x: x ^ constant, 3)
    rng = make_rng(constant)
    assert all(deutsch_jozsa(oracle, rng) == 0 for _ in range(25))

@pytest.mark.parametrize("mask", [1, 2, 3])
def test_deutsch_jozsa_balanced(mask):
    oracle = classical_gate(lambda x: x ^ parity((x >> 1) & mask), 3)
    rng = make_rng(mask)
    for _ in range(25):
        assert deutsch_jozsa(oracle, rng) == mask

def test_deutsch_jozsa_matrix_oracle():
    # f(input) = 1 for inputs 0 and 1, 0 otherwise: balanced
    oracle = real_array_gate([
        0, 1, 0, 0, 0, 0, 0, 0,
        1, 0, 0, 0, 0, 0, 0, 0,
        0, 0, 0, 1, 0, 0, 0, 0,
        0, 0, 1, 0, 0, 0, 0, 0,
        0, 0, 0, 0, 1, 0, 0, 0,
        0, 0, 0, 0, 0, 1, 0, 0,
        0, 0, 0, 0, 0, 0, 1, 0,
        0, 0, 0, 0, 0, 0, 0, 1,
    ])
    rng = make_rng(3)
    assert all(deutsch_jozsa(oracle, rng) != 0 for _ in range(25))

@pytest.mark.parametrize("marked", [0, 5, 7])
def test_grover_finds_marked_item(marked):
    n = 3
    qreg = QReg.zero(n + 1)
    apply_H_range(qreg, 1, n + 1)
    h = hadamard(1)
    u_f = classical_gate(lambda x: x ^ 1 if x >> 1 == marked else x, n + 1)
    d = diffusion(n)
    iterations = int(math.pi * math.sqrt(1 << n) / 4)
    for _ in range(iterations):
        qreg.set_bit(0, 1)
        apply_range(h, qreg, 0)
        apply_reg(u_f, qreg)
        apply_range(d, qreg, 1)

    p = qreg.state_prob(marked << 1) + qreg.state_prob((marked << 1) | 1)
    assert p > 0.9
    assert qreg.norm2() == pytest.approx(1.0)
