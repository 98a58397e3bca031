#!/usr/bin/env python3
"""CLI for the fast modular exponentiation tracer.

Usage examples:
  - Trace 2^23 mod 100:
      modexp-trace 2 23 100

  - Same trace as JSON:
      modexp-trace 2 23 100 --json

  - Allow inputs up to 2^36:
      modexp-trace 5 68719476735 1000003 --limit-bits 36

Omitted positional arguments fall back to the configured defaults
(MODEXP_DEFAULT_A / _N / _M, initially 3, 100 and 23).
"""

from __future__ import annotations

import argparse
import sys

from config import MAX_INPUT_LIMIT_BITS, get_settings
from log import get_logger, setup_logging
from models import CalculationResult, ParsedInputs
from modexp import trace


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Compute a^n mod m by binary exponentiation and show every step."
    )
    ap.add_argument("a", nargs="?", help="Base (non-negative decimal integer).")
    ap.add_argument("n", nargs="?", help="Exponent (non-negative decimal integer).")
    ap.add_argument("m", nargs="?", help="Modulus (positive decimal integer).")
    ap.add_argument(
        "--limit-bits",
        type=int,
        default=None,
        help="Inputs must be below 2**LIMIT_BITS (default: MODEXP_INPUT_LIMIT_BITS or 24).",
    )
    ap.add_argument("--json", action="store_true", help="Print the trace as JSON.")
    return ap


def format_trace(parsed: ParsedInputs, result: CalculationResult) -> str:
    """Render the trace as a plain-text table."""
    a, n, m = parsed.a, parsed.n, parsed.m
    rows = [("#", "bit", "value", "operation")]
    rows += [
        (str(i), str(step.bit), str(step.value), step.operation)
        for i, step in enumerate(result.steps)
    ]
    widths = [max(len(r[c]) for r in rows) for c in range(3)]

    lines = [
        f"n = {n} = {result.binary_str} (binary, {result.bit_count} bits)",
        "",
    ]
    for r in rows:
        lines.append(
            "  ".join(r[c].rjust(widths[c]) for c in range(3)) + "  " + r[3]
        )
    lines.append("")
    lines.append(f"{a}^{n} ≡ {result.result} (mod {m})")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, json=settings.log_json)
    logger = get_logger(__name__)

    defaults = settings.defaults
    a_raw = defaults.a if args.a is None else args.a
    n_raw = defaults.n if args.n is None else args.n
    m_raw = defaults.m if args.m is None else args.m

    bits = settings.input_limit_bits if args.limit_bits is None else args.limit_bits
    if not 1 <= bits <= MAX_INPUT_LIMIT_BITS:
        ap.error(f"--limit-bits must be between 1 and {MAX_INPUT_LIMIT_BITS}")

    outcome, result = trace(a_raw, n_raw, m_raw, limit=2**bits)
    if outcome.error is not None:
        logger.debug("cli_rejected", kind=outcome.error.kind.value)
        print(f"error: {outcome.error.message}", file=sys.stderr)
        return 2

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(format_trace(outcome.parsed, result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
