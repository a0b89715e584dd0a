"""Benchmark: Structured Field parse and serialize throughput.

Measures how many parse and serialize operations complete per second
using the public sfv.parse() and sfv.serialize() APIs on a realistic
dictionary field value.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import sfv

_ITERATIONS: int = 5_000
_SERIALIZE_ITERATIONS: int = 5_000

_SAMPLE_FIELD = (
    b'u=3, i, sig=:cHJldGVuZCB0aGlzIGlzIGJpbmFyeSBjb250ZW50Lg==:, '
    b'lang=("en" "de" "fr");weighted, q=0.875;exp=-12, name="a \\"quoted\\" value"'
)


def bench_parse_throughput() -> dict[str, object]:
    """Benchmark dictionary field parsing throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        sfv.parse(_SAMPLE_FIELD, "dictionary")
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "sfv_parse_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_serialize_throughput() -> dict[str, object]:
    """Benchmark serialization of a pre-parsed dictionary.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    value = sfv.parse(_SAMPLE_FIELD, "dictionary")

    start = time.perf_counter()
    for _ in range(_SERIALIZE_ITERATIONS):
        sfv.serialize(value)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "sfv_serialize_throughput",
        "iterations": _SERIALIZE_ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_SERIALIZE_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _SERIALIZE_ITERATIONS * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_parse_throughput, "parse_throughput_baseline.json"),
        (bench_serialize_throughput, "serialize_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
