import argparse
import sys

from .bench import (
    CANDIDATES,
    DEFAULT_COVERAGES,
    DEFAULT_SAMPLES,
    DEFAULT_SEED,
    DEFAULT_SIZES,
    QUICK_COVERAGES,
    QUICK_SAMPLES,
    QUICK_SIZES,
    print_results,
    run_benchmarks,
)
from .shared import printf_err
from .table import set_debug_trace_resize


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="probeset-bench",
        description="Time insert/delete/iterate/lookup workloads on the probing set engine.",
    )
    parser.add_argument("--sizes", type=int, nargs="+", help=f"Set sizes (default: {DEFAULT_SIZES}).")
    parser.add_argument(
        "--coverages",
        type=int,
        nargs="+",
        help=f"Value range as a multiple of the size (default: {DEFAULT_COVERAGES}).",
    )
    parser.add_argument("--samples", type=int, help=f"Samples per workload (default: {DEFAULT_SAMPLES}).")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument(
        "--only",
        nargs="+",
        metavar="NAME",
        help=f"Candidates to run, any of: {', '.join(CANDIDATES)}.",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Small sizes, one coverage and few samples.",
    )
    parser.add_argument(
        "--trace-resize",
        action="store_true",
        help="Print a line for every table resize.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.only:
        unknown = [name for name in args.only if name not in CANDIDATES]
        if unknown:
            printf_err("Unknown candidate(s): {0:s}\n", ", ".join(unknown))
            printf_err("{0:s}", parser.format_usage())
            sys.exit(64)

    if args.quick:
        sizes, coverages, samples = QUICK_SIZES, QUICK_COVERAGES, QUICK_SAMPLES
    else:
        sizes, coverages, samples = DEFAULT_SIZES, DEFAULT_COVERAGES, DEFAULT_SAMPLES
    if args.sizes:
        sizes = tuple(args.sizes)
    if args.coverages:
        coverages = tuple(args.coverages)
    if args.samples is not None:
        samples = args.samples

    set_debug_trace_resize(args.trace_resize)
    try:
        results = run_benchmarks(args.only, sizes, coverages, samples, args.seed)
    except ValueError as e:
        printf_err("{0:s}\n", " ".join(str(arg) for arg in e.args))
        sys.exit(64)
    finally:
        set_debug_trace_resize(False)

    print_results(results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
