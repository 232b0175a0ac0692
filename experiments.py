"""
Huffman text codec experiments

Runs the codec many times over synthetic text distributions and records
timing, sizes, round-trip correctness and code-property checks.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts, unless --no_plots)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --size 4096 --generators uniform,zipf,english_like
  python experiments.py --outdir results --min_size 64 --max_size 65536 --no_plots
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib.pyplot as plt

import huffman as huff


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]


# Synthetic text generators

ALPHABET = string.ascii_letters + string.digits + string.punctuation + " "

def _weighted_text(size: int, chars: str, weights: List[float], seed: int) -> str:
    rng = random.Random(seed)
    return "".join(rng.choices(chars, weights=weights, k=size))

def gen_uniform(size: int, alphabet: str = ALPHABET, seed: int = 0) -> str:
    rng = random.Random(seed)
    return "".join(rng.choice(alphabet) for _ in range(size))

def gen_zipf_like(size: int, alphabet: str = ALPHABET, s: float = 1.2, seed: int = 0) -> str:
    weights = [1.0 / ((i + 1) ** s) for i in range(len(alphabet))]
    return _weighted_text(size, alphabet, weights, seed)

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [ch for ch in ALPHABET if ch != dominant]
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    chars = " etaoinshrdlcumwfgypbvkjxqETAOINSHRDLCUMWFGYPBVKJXQ-.,"
    weights = []
    for ch in chars:
        if ch == " ":
            weights.append(13.0)
        elif ch in "-.,":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return _weighted_text(size, chars, weights, seed)

def gen_single_symbol(size: int, symbol: str = "a") -> str:
    return symbol * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform": lambda size, seed: gen_uniform(size, seed=seed),
    "uniform_lower": lambda size, seed: gen_uniform(size, alphabet=string.ascii_lowercase, seed=seed),
    "zipf": lambda size, seed: gen_zipf_like(size, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    Unknown dataset names fall back to uniform so a typo in --generators
    does not abort a long run; the returned name records the fallback.
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform", gen_uniform(size, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_length: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    original_bits: int
    compressed_bits: int
    compression_ratio: float  # compressed / original, 0.0 for empty text

    prefix_free: int  # 1 or 0
    weighted_length_violations: int
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    t0 = now_ns()
    ft = huff.build_frequency_table(text)
    root = huff.build_huffman_tree(ft) if ft else None
    code_map = huff.generate_huffman_codes(root) if root is not None else {}
    t1 = now_ns()

    encoded = huff.huffman_encode(text, code_map)
    t2 = now_ns()

    decoded = huff.huffman_decode(encoded, root) if root is not None else ""
    t3 = now_ns()

    original_bits = len(text) * 8
    compressed_bits = len(encoded)
    return MetricRow(
        exp_name="",
        dataset_name="",
        text_length=len(text),
        run_id=0,
        unique_symbols=len(ft),
        build_ms=ns_to_ms(t1 - t0),
        encode_ms=ns_to_ms(t2 - t1),
        decode_ms=ns_to_ms(t3 - t2),
        total_ms=ns_to_ms(t3 - t0),
        original_bits=original_bits,
        compressed_bits=compressed_bits,
        compression_ratio=(compressed_bits / original_bits) if original_bits else 0.0,
        prefix_free=1 if huff.is_prefix_free(code_map) else 0,
        weighted_length_violations=len(huff.weighted_length_violations(ft, code_map)),
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, text_length and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_length)
        key_to.setdefault(key, []).append(r)

    summary_fields = [
        "exp_name", "dataset_name", "text_length", "n_runs",
        "compression_ratio_mean", "compression_ratio_stdev",
        "build_ms_mean", "build_ms_stdev",
        "encode_ms_mean", "encode_ms_stdev",
        "decode_ms_mean", "decode_ms_stdev",
        "total_ms_mean", "total_ms_stdev",
        "weighted_length_violations_total",
        "prefix_free_rate",
        "correctness_ok_rate",
    ]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, length = key

            cr_m, cr_s = mean_stdev([x.compression_ratio for x in items])
            bu_m, bu_s = mean_stdev([x.build_ms for x in items])
            en_m, en_s = mean_stdev([x.encode_ms for x in items])
            de_m, de_s = mean_stdev([x.decode_ms for x in items])
            tt_m, tt_s = mean_stdev([x.total_ms for x in items])

            w.writerow({
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "text_length": length,
                "n_runs": len(items),
                "compression_ratio_mean": cr_m,
                "compression_ratio_stdev": cr_s,
                "build_ms_mean": bu_m,
                "build_ms_stdev": bu_s,
                "encode_ms_mean": en_m,
                "encode_ms_stdev": en_s,
                "decode_ms_mean": de_m,
                "decode_ms_stdev": de_s,
                "total_ms_mean": tt_m,
                "total_ms_stdev": tt_s,
                "weighted_length_violations_total": sum(x.weighted_length_violations for x in items),
                "prefix_free_rate": sum(x.prefix_free for x in items) / len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            })


# Plotting

def plot_ratio_by_distribution(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))
    x = list(range(len(datasets)))
    y = [statistics.mean(r.compression_ratio for r in exp_rows if r.dataset_name == d) for d in datasets]

    plt.figure()
    plt.bar(x, y)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bits / Original Bits")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()


def plot_time_vs_size(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_length for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_length == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field, label in (("build_ms", "build"), ("encode_ms", "encode"), ("decode_ms", "decode")):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=label)
        plt.xscale("log", base=2)
        plt.xlabel("Text Length (characters)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()


# Main

def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Skip chart generation")

    # Experiment 1 controls
    ap.add_argument("--size", type=int, default=4096, help="Experiment 1 fixed text length in characters")
    ap.add_argument("--generators", type=str, default="uniform,zipf,repetitive90,english_like,single_symbol",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--min_size", type=int, default=64, help="Experiment 2 min text length (power-of-two growth)")
    ap.add_argument("--max_size", type=int, default=16384, help="Experiment 2 max text length")
    ap.add_argument("--scaling_generators", type=str, default="uniform,english_like",
                    help="Comma-separated dataset generator names for experiment 2")

    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    for gen_name in parse_csv_list(args.generators):
        for run_id in range(1, args.runs + 1):
            dataset_name, text = generate_dataset(gen_name, max(0, args.size), args.seed + run_id)
            row = run_one(text)
            row.exp_name = "exp1_distribution"
            row.dataset_name = dataset_name
            row.run_id = run_id
            rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    sizes: List[int] = []
    s = max(1, args.min_size)
    while s <= args.max_size:
        sizes.append(s)
        s *= 2

    for gen_name in parse_csv_list(args.scaling_generators):
        for size in sizes:
            for run_id in range(1, args.runs + 1):
                dataset_name, text = generate_dataset(gen_name, size, args.seed + 10_000 + size + run_id)
                row = run_one(text)
                row.exp_name = "exp2_size_scaling"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_ratio_by_distribution(rows, outdir)
        plot_time_vs_size(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    violations = sum(r.weighted_length_violations for r in rows)
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if violations:
        print(f"[warn] {violations} weighted-length violations across all runs", file=sys.stderr)
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0 if ok_rate == 1.0 or not rows else 1


if __name__ == "__main__":
    raise SystemExit(main())
