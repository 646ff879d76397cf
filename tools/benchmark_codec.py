#!/usr/bin/env -S uv run
"""
Codec Benchmark Tool for reqless

Benchmarks decoding and encoding of server responses: single jobs, job
lists, history events and the tracked-jobs envelope.

Usage:
    uv run tools/benchmark_codec.py
    uv run tools/benchmark_codec.py --operations 5000 --history 50
    uv run tools/benchmark_codec.py --scenarios job,events
    uv run tools/benchmark_codec.py --help
"""
# /// script
# requires-python = ">=3.10"
# dependencies = [
#     "pydantic>=2.0",
#     "typer>=0.9.0",
#     "rich>=13.0",
# ]
# ///

from __future__ import annotations

import statistics
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Import reqless from the local checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from reqless.core import codec

app = typer.Typer(
    help="Benchmark the reqless JSON codec",
    add_completion=False,
)


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs."""

    operations: int = 1000
    history_length: int = 10
    jobs_per_list: int = 25
    scenarios: list[str] = field(
        default_factory=lambda: ["job", "jobs", "events", "tracked"]
    )


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""

    scenario: str
    operation: str
    payload_bytes: int
    latencies: list[float]  # seconds

    @property
    def total_time(self) -> float:
        return sum(self.latencies)

    @property
    def ops_per_sec(self) -> float:
        total = self.total_time
        return len(self.latencies) / total if total > 0 else 0.0

    @property
    def p50(self) -> float:
        return statistics.median(self.latencies) if self.latencies else 0.0

    @property
    def p99(self) -> float:
        if not self.latencies:
            return 0.0
        sorted_latencies = sorted(self.latencies)
        idx = int(len(sorted_latencies) * 0.99)
        return sorted_latencies[min(idx, len(sorted_latencies) - 1)]

    @staticmethod
    def format_latency_us(seconds: float) -> str:
        us = seconds * 1_000_000
        if us < 10:
            return f"{us:.2f}µs"
        return f"{us:.1f}µs"


# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------


def sample_job(jid: str, history_length: int) -> dict[str, Any]:
    """A server-shaped job document with a mixed history."""
    history: list[dict[str, Any]] = [
        {"what": "put", "when": 1700000000000, "queue": "emails"}
    ]
    for i in range(1, history_length):
        if i % 3 == 0:
            history.append({"what": "popped", "when": 1700000000000 + i, "worker": "w-1"})
        elif i % 3 == 1:
            history.append({"what": "throttled", "when": 1700000000000 + i, "queue": "emails"})
        else:
            history.append({"what": "note", "when": 1700000000000 + i, "text": f"step {i}"})
    return {
        "dependencies": {},
        "dependents": [],
        "expires": 1700000060000,
        "failure": {},
        "history": history,
        "data": '{"to": "user@example.com"}',
        "jid": jid,
        "klass": "SendEmail",
        "priority": 0,
        "queue": "emails",
        "remaining": 5,
        "retries": 5,
        "spawned_from_jid": False,
        "state": "running",
        "tags": ["urgent"],
        "throttles": ["ql:q:emails"],
        "tracked": False,
        "worker": "w-1",
    }


def build_payloads(config: BenchmarkConfig) -> dict[str, bytes]:
    job = sample_job("jid-0", config.history_length)
    jobs = [sample_job(f"jid-{i}", config.history_length) for i in range(config.jobs_per_list)]
    return {
        "job": codec.dumps(job),
        "jobs": codec.dumps(jobs),
        "events": codec.dumps(job["history"]),
        "tracked": codec.dumps({"jobs": jobs, "expired": ["gone-1", "gone-2"]}),
    }


# ---------------------------------------------------------------------------
# Core Benchmark Functions
# ---------------------------------------------------------------------------


def time_calls(fn: Callable[[], object], n: int) -> list[float]:
    """Run ``fn`` n times and return the latency of each call in seconds."""
    latencies = []
    for _ in range(n):
        start = perf_counter()
        fn()
        latencies.append(perf_counter() - start)
    return latencies


def run_scenario(name: str, payload: bytes, n: int) -> list[BenchmarkResult]:
    """Benchmark decode and encode for one scenario."""
    match name:
        case "job":
            decoded = codec.decode_job(payload)
            decode = lambda: codec.decode_job(payload)  # noqa: E731
            encode = lambda: codec.encode_job(decoded)  # noqa: E731
        case "jobs":
            decoded_jobs = codec.decode_jobs(payload)
            decode = lambda: codec.decode_jobs(payload)  # noqa: E731
            encode = lambda: codec.encode_jobs(decoded_jobs)  # noqa: E731
        case "events":
            raw_events = codec.loads(payload)
            events = [codec.decode_event(codec.dumps(e)) for e in raw_events]
            encoded_events = [codec.encode_event(e) for e in events]
            decode = lambda: [codec.decode_event(e) for e in encoded_events]  # noqa: E731
            encode = lambda: [codec.encode_event(e) for e in events]  # noqa: E731
        case "tracked":
            decoded_tracked = codec.decode_tracked_jobs(payload)
            decode = lambda: codec.decode_tracked_jobs(payload)  # noqa: E731
            encode = lambda: codec.encode_tracked_jobs(decoded_tracked)  # noqa: E731
        case _:
            raise ValueError(f"Unknown scenario: {name}")

    return [
        BenchmarkResult(name, "decode", len(payload), time_calls(decode, n)),
        BenchmarkResult(name, "encode", len(payload), time_calls(encode, n)),
    ]


# ---------------------------------------------------------------------------
# Result Formatting
# ---------------------------------------------------------------------------


def format_results(results: list[BenchmarkResult], config: BenchmarkConfig) -> None:
    console = Console()

    console.print()
    console.print(
        Panel(
            "[bold cyan]Codec Benchmark Results[/bold cyan]\n"
            f"{config.operations} ops, history of {config.history_length}, "
            f"{config.jobs_per_list} jobs per list",
            expand=False,
        )
    )

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Scenario", style="cyan")
    table.add_column("Operation")
    table.add_column("Bytes", justify="right")
    table.add_column("Ops/sec", justify="right", style="green")
    table.add_column("P50", justify="right")
    table.add_column("P99", justify="right")

    for result in results:
        table.add_row(
            result.scenario,
            result.operation,
            str(result.payload_bytes),
            f"{result.ops_per_sec:,.0f}",
            result.format_latency_us(result.p50),
            result.format_latency_us(result.p99),
        )

    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@app.command()
def main(
    operations: int = typer.Option(
        1000,
        "--operations",
        "-n",
        help="Number of decode/encode calls per benchmark",
    ),
    history: int = typer.Option(
        10,
        "--history",
        help="Number of history events per job",
    ),
    scenarios: str = typer.Option(
        "job,jobs,events,tracked",
        "--scenarios",
        "-s",
        help="Comma-separated scenarios to run",
    ),
) -> None:
    """
    Benchmark the reqless codec.

    Measures throughput (ops/sec) and latency percentiles (p50/p99) for
    decoding server JSON into models and encoding models back to JSON.
    """
    config = BenchmarkConfig(
        operations=operations,
        history_length=max(history, 1),
        scenarios=[s.strip() for s in scenarios.split(",") if s.strip()],
    )
    payloads = build_payloads(config)
    console = Console(stderr=True)

    all_results: list[BenchmarkResult] = []
    for name in config.scenarios:
        if name not in payloads:
            console.print(f"[red]Unknown scenario: {name}[/red]")
            raise typer.Exit(code=2)
        all_results.extend(run_scenario(name, payloads[name], config.operations))

    format_results(all_results, config)


if __name__ == "__main__":
    app()
