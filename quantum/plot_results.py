# quantum/plot_results.py
import csv, glob, os
from collections import defaultdict
from statistics import median

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .bench import DATA_DIR

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        for row in csv.DictReader(f):
            row["qubits"]  = int(row["qubits"])
            row["depth"]   = int(row["depth"])
            row["threads"] = int(row["threads"])
            row["wall_ms"] = float(row["wall_ms"])
            rows.append(row)
    return rows

def median_by(rows, key):
    """{key value: median wall_ms}, so repeated runs collapse to one point."""
    buckets = defaultdict(list)
    for r in rows:
        buckets[r[key]].append(r["wall_ms"])
    return {k: median(v) for k, v in sorted(buckets.items())}

def _save(out_dir, name, xlabel, ylabel, title, log=False):
    plt.xlabel(xlabel)
    plt.ylabel(ylabel)
    plt.title(title)
    if log:
        plt.yscale("log")
    plt.grid(True)
    path = os.path.join(out_dir, name)
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_series(rows, key, out_dir, tag):
    pts = median_by(rows, key)
    if not pts:
        return None
    plt.figure()
    plt.plot(list(pts), list(pts.values()), marker="o")
    return _save(out_dir, f"runtime_vs_{key}_{tag}.png", key, "Runtime (ms)",
                 f"Runtime vs {key} [{tag}]")

def plot_speedup(rows, out_dir, tag):
    pts = median_by(rows, "threads")
    t1 = pts.get(1)
    if not t1:
        return None
    plt.figure()
    plt.plot(list(pts), [t1 / w for w in pts.values()], marker="o")
    return _save(out_dir, f"speedup_vs_threads_{tag}.png", "Threads", "Speedup (T1/Tt)",
                 f"Speedup vs Threads [{tag}]")

def plot_qubits_compare(data_dir=DATA_DIR):
    """All backends' qubits.csv on one log-scale figure."""
    series = {}
    for path in sorted(glob.glob(os.path.join(data_dir, "*", "qubits.csv"))):
        backend = os.path.basename(os.path.dirname(path))
        series[backend] = median_by(load_rows(path), "qubits")
    if not series:
        return None
    plt.figure()
    for backend, pts in series.items():
        plt.plot(list(pts), list(pts.values()), marker="o", label=backend)
    plt.legend()
    return _save(data_dir, "runtime_vs_qubits_compare.png", "Qubits (n)",
                 "Runtime (ms, log scale)", "Runtime vs Qubits", log=True)

def main(data_dir=DATA_DIR):
    csvs = sorted(glob.glob(os.path.join(data_dir, "*", "*.csv")))
    if not csvs:
        print(f"No CSV files found under {data_dir}/")
        return

    for path in csvs:
        tag = os.path.splitext(os.path.basename(path))[0]
        backend = os.path.basename(os.path.dirname(path))
        out_dir = os.path.dirname(path)
        rows = load_rows(path)
        print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")

        if tag == "threads":
            plot_series(rows, "threads", out_dir, backend)
            plot_speedup(rows, out_dir, backend)
        elif tag == "depth":
            plot_series(rows, "depth", out_dir, backend)
        else:
            plot_series(rows, "qubits", out_dir, backend)
    plot_qubits_compare(data_dir)
    print("\nSaved all plots under data/<backend>/*.png")

if __name__ == "__main__":
    main()
