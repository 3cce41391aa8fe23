# quantum/bench.py
"""Wall-clock sweeps of random register circuits, one CSV per sweep.

    python -m quantum.bench qubits --ns 8,10,12 --backend numba
    python -m quantum.bench threads --n 14 --threads 1,2,4
    python -m quantum.bench depth --n 10 --depths 5,10,20
"""
import argparse, csv, os, platform, socket, time
from datetime import datetime
import numpy as np
from .circuit import Circuit
from .gate import classical_gate
from . import engine

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")
HEADER = ["qubits", "depth", "backend", "threads", "gates", "wall_ms", "host", "timestamp"]

def cnot():
    # control = bit 1, target = bit 0 of the 2-qubit gate
    return classical_gate(lambda x: x ^ 1 if x & 2 else x, 2)

def random_circuit(n, depth, seed=0):
    """Even layers put Hadamards on random qubits, odd layers CNOT or diffusion on pairs."""
    rng = np.random.default_rng(seed)
    c = Circuit.empty(n)
    cx = cnot()
    for layer in range(depth):
        coins = rng.integers(0, 2, size=n)
        if layer % 2 == 0:
            for k in np.flatnonzero(coins == 0):
                c.h(int(k))
        else:
            for k in range(0, n - 1, 2):
                if coins[k] == 0:
                    c.gate(cx, k, k + 1)
                else:
                    c.diffusion(k, k + 2)
    return c

def time_run(circ, backend, threads=None):
    t0 = time.perf_counter()
    circ.run(backend=backend, num_threads=threads, check_norm=False)
    return (time.perf_counter() - t0) * 1e3

def sweep(points, backend, out_path, threads=None):
    """Time each ``(n, depth)`` in ``points`` and write one CSV row per run.

    The first circuit is run once untimed so numba compiles before timing.
    ``threads`` is a list matching ``points`` or None for the current pool.
    """
    threads = threads or [None] * len(points)
    host, stamp = socket.gethostname(), datetime.now().isoformat(timespec="seconds")
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "w", newline="") as f:
        out = csv.DictWriter(f, fieldnames=HEADER)
        out.writeheader()
        seed = 42
        time_run(random_circuit(*points[0], seed=seed), backend, threads[0])
        for (n, depth), t in zip(points, threads):
            circ = random_circuit(n, depth, seed=seed)
            wall = time_run(circ, backend, t)
            used = 0 if backend == "serial" else (t or engine.get_threads())
            out.writerow({"qubits": n, "depth": depth, "backend": backend, "threads": used,
                          "gates": len(circ.ops), "wall_ms": f"{wall:.3f}",
                          "host": host, "timestamp": stamp})
            print(f"  n={n} depth={depth} threads={used}  wall={wall:.2f} ms")
    return out_path

def _ints(s):
    return [int(x) for x in s.split(",")]

def main(argv=None):
    p = argparse.ArgumentParser(description="register benchmarks → data/<backend>/*.csv")
    p.add_argument("--out", default=DATA_DIR)
    sub = p.add_subparsers(dest="cmd", required=True)
    q = sub.add_parser("qubits")
    q.add_argument("--ns", type=_ints, required=True)
    q.add_argument("--depth", type=int, default=20)
    t = sub.add_parser("threads")
    t.add_argument("--n", type=int, default=14)
    t.add_argument("--depth", type=int, default=20)
    t.add_argument("--threads", type=_ints, default=[1, 2, 4, 8])
    d = sub.add_parser("depth")
    d.add_argument("--n", type=int, default=10)
    d.add_argument("--depths", type=_ints, default=[5, 10, 20, 40])
    for s in (q, d):
        s.add_argument("--backend", default="numba", choices=list(engine.BACKENDS))
    args = p.parse_args(argv)

    threads = None
    if args.cmd == "qubits":
        points = [(n, args.depth) for n in args.ns]
    elif args.cmd == "depth":
        points = [(args.n, depth) for depth in args.depths]
    else:
        args.backend = "numba"
        pool = engine.max_threads()
        threads = [min(x, pool) for x in args.threads]
        points = [(args.n, args.depth)] * len(threads)
    path = os.path.join(args.out, args.backend, f"{args.cmd}.csv")
    print(f"[run] {args.cmd} ({platform.machine()}) → {path}")
    sweep(points, args.backend, path, threads)

if __name__ == "__main__":
    main()
