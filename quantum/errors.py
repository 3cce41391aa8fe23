# quantum/errors.py

class QuantumError(Exception):
    """Base class for register and gate errors."""


class InvalidArgument(QuantumError, ValueError):
    """Malformed construction input or a bit value outside {0, 1}."""


class InvalidTarget(QuantumError, IndexError):
    """Qubit index outside the register, or a bad target list."""


class NonUnitaryGate(QuantumError, ValueError):
    """A checked gate constructor was handed a matrix failing the Gram test."""
