"""Counterexample search -- discovers gaps in the engine or the validator.

This module runs independently of the test suite.  Over a small,
fully enumerable domain it systematically searches for:

1. Postcondition violations: traces that disagree with the contract
   (wrong result, broken prefix invariant, malformed binary string).
2. Error condition violations: raw inputs that should be rejected with
   a particular error kind but are accepted or rejected differently.
3. Property violations: algebraic relationships that fail for some
   input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from itertools import product

sys.path.insert(0, ".")

from contract import Contract, build_contract
from modexp import calculate, validate_and_parse


# Raw strings that exercise every validator branch on a small limit.
RAW_SAMPLES: tuple[str, ...] = (
    "", " ", "0", "1", "007", " 5 ", "12", "15", "16", "99999",
    "-1", "+3", "1.0", "0x1", "1_0", "a", "٣", "1 2",
)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    contract: Contract,
    max_value: int,
) -> tuple[list[Counterexample], int]:
    """Exhaustively verify engine postconditions for a, n in [0, max_value], m in [1, max_value]."""
    cxs: list[Counterexample] = []
    checks = 0
    posts = contract.operations["calculate"].postconditions

    for a, n, m in product(
        range(max_value + 1), range(max_value + 1), range(1, max_value + 1)
    ):
        checks += 1
        try:
            result = calculate(a, n, m)
        except Exception as e:
            cxs.append(Counterexample(
                category="unexpected_error",
                operation="calculate",
                inputs=(a, n, m),
                expected="no error",
                actual=f"{type(e).__name__}: {e}",
                description="Engine raised on valid input",
            ))
            continue

        for post in posts:
            if not post.check(a, n, m, result):
                cxs.append(Counterexample(
                    category="postcondition_violation",
                    operation="calculate",
                    inputs=(a, n, m),
                    expected=post.description,
                    actual=f"result={result.result} binary={result.binary_str}",
                    description=f"Postcondition '{post.name}' violated",
                ))

    return cxs, checks


def search_error_condition_violations(
    contract: Contract,
) -> tuple[list[Counterexample], int]:
    """Verify every validator error condition yields its error kind."""
    cxs: list[Counterexample] = []
    checks = 0
    op = contract.operations["validate_and_parse"]

    for a, n, m in product(RAW_SAMPLES, repeat=3):
        checks += 1
        outcome = validate_and_parse(a, n, m, limit=contract.limit)

        for post in op.postconditions:
            if not post.check(a, n, m, outcome):
                cxs.append(Counterexample(
                    category="postcondition_violation",
                    operation=op.name,
                    inputs=(a, n, m),
                    expected=post.description,
                    actual=repr(outcome),
                    description=f"Postcondition '{post.name}' violated",
                ))

        # Conditions are ordered; the first that triggers decides the kind.
        expected = next((ec for ec in op.error_conditions if ec.trigger(a, n, m)), None)
        actual_kind = outcome.error.kind if outcome.error is not None else None
        expected_kind = expected.kind if expected is not None else None
        if actual_kind != expected_kind:
            cxs.append(Counterexample(
                category="missing_error" if actual_kind is None else "wrong_error",
                operation=op.name,
                inputs=(a, n, m),
                expected=str(expected_kind),
                actual=str(actual_kind),
                description=(
                    f"Error condition '{expected.name}' should decide the outcome"
                    if expected is not None
                    else "Input should have been accepted"
                ),
            ))

    return cxs, checks


def search_property_violations(
    contract: Contract,
    max_value: int,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        for args in product(range(max_value + 1), repeat=prop.arity):
            checks += 1
            try:
                holds = prop.check(calculate, *args)
            except ValueError:
                continue
            if not holds:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=args,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(limit: int, max_value: int) -> SearchReport:
    """Run the complete counterexample search for one configuration."""
    contract = build_contract(limit)
    report = SearchReport()

    for cxs, checks in (
        search_postcondition_violations(contract, max_value),
        search_error_condition_violations(contract),
        search_property_violations(contract, max_value),
    ):
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across several configurations."""
    configs = [
        ("limit 16,   domain [0, 7]", 16, 7),
        ("limit 2^24, domain [0, 12]", 2**24, 12),
    ]

    all_passed = True
    for name, limit, max_value in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(limit, max_value)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
