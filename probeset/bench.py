from dataclasses import dataclass
from functools import partial
import random
import statistics
import time
from typing import Any, Callable

from .sets import HashSet, StableSet
from .shared import printf
from .slot import STORAGE_POLICIES
from .table import Table

OPERATIONS = 100

DEFAULT_SIZES = (100, 1000, 10000)
DEFAULT_COVERAGES = (2, 10, 100)
DEFAULT_SAMPLES = 10
DEFAULT_SEED = 2934823

QUICK_SIZES = (100, 1000)
QUICK_COVERAGES = (10,)
QUICK_SAMPLES = 3


CANDIDATES: dict[str, Callable[[], Any]] = {
    "builtin": set,
    "stableset": StableSet,
    "hashset": HashSet,
    **{
        f"table-{name}": partial(Table, storage=storage)
        for name, storage in STORAGE_POLICIES.items()
    },
}


@dataclass
class BenchResult:
    candidate: str
    workload: str
    size: int
    coverage: int
    median_ms: float
    min_ms: float


def setup_set(factory: Callable[[], Any], top: int, count: int, rng: random.Random):
    s = factory()
    while len(s) < count:
        s.add(rng.randint(1, top))
    return s


def insert_workload(s, data: list[int]) -> int:
    for value in data:
        s.add(value)
    return len(s)


def delete_workload(s, data: list[int]) -> int:
    for value in data:
        if value in s:
            s.discard(value)
    return len(s)


def iterate_workload(s, data: list[int]) -> int:
    buffer = [value for value in s]
    return len(buffer)


def lookup_workload(s, data: list[int]) -> int:
    count = 0
    for value in data:
        if value in s:
            count += 1
    return count


WORKLOADS: dict[str, Callable[[Any, list[int]], int]] = {
    "insert": insert_workload,
    "delete": delete_workload,
    "iterate": iterate_workload,
    "lookup": lookup_workload,
}


def time_workload(
    factory: Callable[[], Any],
    workload: Callable[[Any, list[int]], int],
    size: int,
    coverage: int,
    samples: int,
    rng: random.Random,
) -> tuple[float, float]:
    top = size * coverage
    data = [rng.randint(1, top) for _ in range(OPERATIONS)]

    times = []
    for _ in range(samples):
        start = time.perf_counter()
        s = setup_set(factory, top, size, rng)
        workload(s, data)
        times.append((time.perf_counter() - start) * 1000)

    return statistics.median(times), min(times)


def run_benchmarks(
    candidates: list[str] | None = None,
    sizes: tuple[int, ...] = DEFAULT_SIZES,
    coverages: tuple[int, ...] = DEFAULT_COVERAGES,
    samples: int = DEFAULT_SAMPLES,
    seed: int = DEFAULT_SEED,
) -> list[BenchResult]:
    names = list(CANDIDATES) if candidates is None else candidates
    for name in names:
        if name not in CANDIDATES:
            raise ValueError("unknown candidate", name)
    if samples < 1:
        raise ValueError("samples must be positive", samples)
    for size in sizes:
        if size < 1:
            raise ValueError("sizes must be positive", size)
    for coverage in coverages:
        if coverage < 1:
            raise ValueError("coverages must be positive", coverage)

    results = []
    for name in names:
        factory = CANDIDATES[name]
        for size in sizes:
            for coverage in coverages:
                # same data for every candidate
                rng = random.Random(f"{seed}:{size}:{coverage}")
                for workload_name, workload in WORKLOADS.items():
                    median_ms, min_ms = time_workload(
                        factory, workload, size, coverage, samples, rng
                    )
                    results.append(
                        BenchResult(name, workload_name, size, coverage, median_ms, min_ms)
                    )
    return results


def print_results(results: list[BenchResult]):
    candidate = None
    for result in results:
        if result.candidate != candidate:
            candidate = result.candidate
            printf("\n== {0:s} ==\n", candidate)
            printf("{0:>8s} {1:>8s} {2:<8s} {3:>12s} {4:>12s}\n",
                   "size", "coverage", "workload", "median ms", "min ms")

        printf(
            "{0:8d} {1:8d} {2:<8s} {3:12.3f} {4:12.3f}\n",
            result.size,
            result.coverage,
            result.workload,
            result.median_ms,
            result.min_ms,
        )
