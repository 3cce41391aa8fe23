# quantum/gates.py
import math

from . import engine
from .gate import (FuncGate, array_gate, check_bits, classical_gate, func_gate,
                   func_gate_unchecked, real_array_gate)
from .state import QReg

__all__ = [
    "hadamard", "diffusion", "classical_gate", "array_gate", "real_array_gate",
    "apply_H", "apply_H_range", "apply_H_reg",
    "apply_diffusion", "apply_diffusion_range", "apply_diffusion_reg",
]

# ----------------------------- Hadamard -----------------------------

def hadamard(bits: int = 1) -> FuncGate:
    """bits-qubit Hadamard transform, (-1)**popcount(row & col) / sqrt(2**bits)."""
    bits = check_bits(bits)
    d = float(1 << (bits >> 1))
    if bits & 1:
        d *= math.sqrt(2)
    p = complex(1.0 / d, 0)
    n = -p

    def element(row: int, col: int) -> complex:
        return n if bin(row & col).count("1") & 1 else p

    # orthogonal by construction
    return func_gate_unchecked(element, bits)

def apply_H(qreg: QReg, target: int, **kw):
    engine.apply(hadamard(1), qreg, [target], **kw)

def apply_H_range(qreg: QReg, start: int, end: int, **kw):
    """Hadamard on qubits [start, end)."""
    engine.apply_range(hadamard(end - start), qreg, start, **kw)

def apply_H_reg(qreg: QReg, **kw):
    apply_H_range(qreg, 0, qreg.n, **kw)

# ----------------------------- Diffusion -----------------------------

def diffusion(bits: int = 1) -> FuncGate:
    """Grover diffusion 2|s><s| - I over the uniform superposition |s>."""
    bits = check_bits(bits)
    a2 = complex(2.0 / float(1 << bits), 0)
    a2m1 = a2 - 1

    def element(row: int, col: int) -> complex:
        return a2m1 if row == col else a2

    return func_gate(element, bits)

def apply_diffusion(qreg: QReg, target: int, **kw):
    engine.apply(diffusion(1), qreg, [target], **kw)

def apply_diffusion_range(qreg: QReg, start: int, end: int, **kw):
    """Diffusion on qubits [start, end)."""
    engine.apply_range(diffusion(end - start), qreg, start, **kw)

def apply_diffusion_reg(qreg: QReg, **kw):
    apply_diffusion_range(qreg, 0, qreg.n, **kw)
