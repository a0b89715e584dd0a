"""Benchmark: Structured Field parse latency (p50/p95/mean).

Measures per-call latency for parsing a short list and a long list of
Accept-style members.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import sfv

_WARMUP: int = 100
_ITERATIONS: int = 3_000

_SHORT_LIST = b"text/html;q=1.0, application/json;q=0.9"

_LONG_LIST = b", ".join(
    b"type%d/sub%d;q=0.%03d;charset=utf-8;flag" % (i, i, i) for i in range(1, 65)
)


def _measure(operation: str, field_value: bytes) -> dict[str, object]:
    for _ in range(_WARMUP):
        sfv.parse(field_value, "list")

    latencies_ms: list[float] = []
    for _ in range(_ITERATIONS):
        t0 = time.perf_counter()
        sfv.parse(field_value, "list")
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": operation,
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def bench_parse_latency() -> dict[str, object]:
    """Benchmark parse latency on a two-member list.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    return _measure("sfv_parse_latency_short", _SHORT_LIST)


def bench_parse_latency_long() -> dict[str, object]:
    """Benchmark parse latency on a 64-member list with parameters."""
    return _measure("sfv_parse_latency_long", _LONG_LIST)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    for bench_fn, fname in [
        (bench_parse_latency, "latency_short_baseline.json"),
        (bench_parse_latency_long, "latency_long_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
