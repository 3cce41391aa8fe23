# quantum/circuit.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from . import engine, settings
from . import gates as G
from .state import QReg

Op = Tuple[str, Tuple]  # e.g. ("H",(start,end)), ("GATE",(gate,targets)), ("SET",(k,v))

@dataclass
class Circuit:
    """A recorded gate sequence, replayed on a fresh register by ``run``."""
    n: int
    ops: List[Op] = field(default_factory=list)

    @staticmethod
    def empty(n: int) -> "Circuit":
        return Circuit(n, [])

    def h(self, start: int, end: Optional[int] = None):
        end = start + 1 if end is None else end
        self.ops.append(("H", (start, end))); return self

    def diffusion(self, start: int, end: Optional[int] = None):
        end = start + 1 if end is None else end
        self.ops.append(("DIFFUSION", (start, end))); return self

    def gate(self, g, *targets: int):
        self.ops.append(("GATE", (g, tuple(targets)))); return self

    def set_bit(self, k: int, value: int):
        self.ops.append(("SET", (k, value))); return self

    def run(self, value: int = 0, backend: Optional[str] = None, dtype=settings.DEFAULT_DTYPE,
            check_norm=True, num_threads=None, check_norm_tol=None) -> QReg:
        st = QReg.create(self.n, value, dtype=dtype)
        kw = {"backend": backend, "num_threads": num_threads}

        for name, args in self.ops:
            if name == "H":
                start, end = args; G.apply_H_range(st, start, end, **kw)
            elif name == "DIFFUSION":
                start, end = args; G.apply_diffusion_range(st, start, end, **kw)
            elif name == "GATE":
                g, targets = args; engine.apply(g, st, targets, **kw)
            elif name == "SET":
                k, v = args; st.set_bit(k, v)
            else:
                raise ValueError(f"Unknown op {name}")

        if check_norm:
            st.check_normalized(tol=check_norm_tol)
        return st
