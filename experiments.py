# experiments.py

"""
Huffman text codec: measurement harness

Runs the codec over synthetic texts of several symbol distributions and
sizes, with repeated runs, and reports how close the code gets to the
entropy bound and how long each stage takes

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts, unless --no_plots)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --sizes 1024,65536 --generators zipf,english_like
"""

from __future__ import annotations

import argparse
import csv
import logging
import random
import statistics
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import huffman as huff
from logging_utils import setup_logging

logger = logging.getLogger("experiments")

ALPHABET_BASE = 33 # '!' is the first printable, non-space character


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

def _sample(rng: random.Random, symbols: str, weights: List[float], size: int) -> str:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)

    out = []
    for _ in range(size):
        r = rng.random()
        lo, hi = 0, len(cdf) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if r <= cdf[mid]:
                hi = mid
            else:
                lo = mid + 1
        out.append(symbols[lo])
    return "".join(out)

def gen_uniform(size: int, alphabet: int = 64, seed: int = 0) -> str:
    rng = random.Random(seed)
    symbols = "".join(chr(ALPHABET_BASE + i) for i in range(alphabet))
    return "".join(rng.choice(symbols) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    symbols = "".join(chr(ALPHABET_BASE + i) for i in range(alphabet))
    weights = [1.0 / ((i + 1) ** s) for i in range(alphabet)]
    return _sample(rng, symbols, weights, size)

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [chr(ALPHABET_BASE + i) for i in range(64) if chr(ALPHABET_BASE + i) != dominant]
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = " etaoinshrdlcumwfgypbvkjxqETAOINSHRDLCUMWFGYPBVKJXQ.,"
    weights = []
    for ch in chars:
        if ch == " ":
            weights.append(13.0)
        elif ch in ".,":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0 if ch.islower() else 0.6)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5 if ch.islower() else 0.25)
        else:
            weights.append(1.2 if ch.islower() else 0.1)
    return _sample(rng, chars, weights, size)

def gen_single_symbol(size: int, seed: int = 0) -> str:
    return "a" * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform": lambda size, seed: gen_uniform(size, alphabet=64, seed=seed),
    "zipf": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive": lambda size, seed: gen_repetitive(size, dominant="A", dom_frac=0.90, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size, seed=seed),
}

def generate_text(name: str, size: int, seed: int) -> str:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        known = ", ".join(sorted(GENERATOR_REGISTRY))
        raise ValueError(f"unknown generator {name!r} (known: {known})")
    return fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    dataset_name: str
    text_size: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    weighted_length: int
    bits_per_symbol: float
    entropy_bits: float
    correctness_ok: int  # 1 or 0


def run_one(text: str, dataset_name: str = "", run_id: int = 0) -> MetricRow:
    t0 = now_ns()
    ft = huff.frequency_table(text)
    root = huff.build_huffman_tree(ft)
    code_map = huff.generate_huffman_codes(root)
    t1 = now_ns()

    encoded = huff.huffman_encode(text, code_map)
    t2 = now_ns()

    decoded = huff.huffman_decode(encoded, root)
    t3 = now_ns()

    build_ms, encode_ms, decode_ms = ns_to_ms(t1 - t0), ns_to_ms(t2 - t1), ns_to_ms(t3 - t2)
    correctness_ok = 1 if decoded == text else 0
    if not correctness_ok:
        logger.warning("round trip mismatch on %s (size %d, run %d)", dataset_name, len(text), run_id)

    return MetricRow(
        dataset_name=dataset_name,
        text_size=len(text),
        run_id=run_id,
        unique_symbols=len(ft),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=len(encoded),
        weighted_length=huff.weighted_code_length(ft, code_map),
        bits_per_symbol=len(encoded) / max(1, len(text)),
        entropy_bits=huff.shannon_entropy(ft),
        correctness_ok=correctness_ok,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    names = [f.name for f in fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=names)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in names})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


SUMMARY_METRICS = ("bits_per_symbol", "entropy_bits", "build_ms", "encode_ms", "decode_ms", "total_ms")

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by dataset_name and text_size and compute mean/stdev
    """
    key_to: Dict[Tuple[str, int], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.dataset_name, r.text_size), []).append(r)

    summary_fields = ["dataset_name", "text_size", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (dataset_name, size), items in sorted(key_to.items()):
            out = {"dataset_name": dataset_name, "text_size": size, "n_runs": len(items)}
            for m in SUMMARY_METRICS:
                out[f"{m}_mean"], out[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            out["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(out)


# Plotting

def plot_code_efficiency(rows: List[MetricRow], outdir: Path) -> None:
    if not rows:
        return
    largest = max(r.text_size for r in rows)
    big_rows = [r for r in rows if r.text_size == largest]
    datasets = sorted(set(r.dataset_name for r in big_rows))
    x = list(range(len(datasets)))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in big_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    plt.plot(x, [mean_for(d, "bits_per_symbol") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title(f"Code Length vs Entropy ({largest} symbols)")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "bits_per_symbol.png", dpi=200)
    plt.close()


def plot_timing(rows: List[MetricRow], outdir: Path) -> None:
    for dist in sorted(set(r.dataset_name for r in rows)):
        dist_rows = [r for r in rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_size for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_size == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field in ("build_ms", "encode_ms", "decode_ms"):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=field[:-3])
        plt.xlabel("Text Size (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Stage Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"timing_{dist}.png", dpi=200)
        plt.close()


# Main

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Measure the Huffman text codec on synthetic inputs")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--sizes", type=str, default="1024,16384,131072",
                    help="Comma-separated text sizes in symbols")
    ap.add_argument("--generators", type=str, default="uniform,zipf,repetitive,english_like",
                    help="Comma-separated generator names")
    ap.add_argument("--no_plots", action="store_true", help="Skip chart generation")
    ap.add_argument("--log_level", type=str, default="INFO", help="Logging level")
    return ap


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("experiments", level=getattr(logging, args.log_level.upper(), logging.INFO))

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    sizes = [max(1, int(s)) for s in parse_csv_list(args.sizes)]
    rows: List[MetricRow] = []
    try:
        for gen_name in parse_csv_list(args.generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    text = generate_text(gen_name, size, args.seed + size + run_id)
                    rows.append(run_one(text, dataset_name=gen_name, run_id=run_id))
                logger.info("%s size=%d: %d runs done", gen_name, size, args.runs)
    except (ValueError, huff.HuffmanError) as e:
        logger.error("%s", e)
        return 1

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_code_efficiency(rows, outdir)
        plot_timing(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
