# quantum/apply_serial.py
"""Reference kernels: plain Python loops over the gate's element accessor."""
import numpy as np

_UNASSIGNED = 2


def state_index_for_target(app: int, value: int, n: int, targets) -> int:
    """Basis index for application ``app`` with the targets holding ``value``.

    Bit i of ``value`` lands on qubit ``targets[i]``; the remaining qubits,
    in increasing position order, take successive bits of ``app``.
    """
    digits = [_UNASSIGNED] * n
    for i, t in enumerate(targets):
        digits[t] = (value >> i) & 1
    app_pos = 0
    for i in range(n):
        if digits[i] == _UNASSIGNED:
            digits[i] = (app >> app_pos) & 1
            app_pos += 1
    index = 0
    for i, d in enumerate(digits):
        index += d << i
    return index


def contract(psi: np.ndarray, gate, targets, n: int) -> np.ndarray:
    """Apply ``gate`` to ``targets`` of an n-qubit amplitude array.

    Returns a fresh array; ``psi`` is only read.
    """
    width = gate.width
    num_apps = 1 << (n - len(targets))
    new_psi = np.zeros_like(psi)
    for app in range(num_apps):
        # old indices touched by this application, by column
        cols = [state_index_for_target(app, col, n, targets) for col in range(width)]
        for row in range(width):
            acc = 0j
            for col in range(width):
                acc += gate.element(row, col) * psi[cols[col]]
            new_psi[cols[row]] = acc
    return new_psi


def gram_is_unitary(gate, tol: float) -> bool:
    """Serial Gram test; stops at the first entry off the identity."""
    w = gate.width
    for row in range(w):
        for col in range(w):
            acc = 0j
            for i in range(w):
                acc += gate.element(row, i) * gate.element(i, col)
            expect = 1.0 if row == col else 0.0
            if not abs(abs(acc) - expect) < tol:
                return False
    return True
