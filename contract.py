"""Executable contract for the modular exponentiation core.

Each core operation is described as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy given valid inputs
- error conditions: inputs that must be rejected, and how
- algebraic properties: mathematical relationships that must hold

The contract is machine-readable.  Conformance tests and the
counterexample search iterate over it instead of restating each rule.

Layers
------
OperationContract  per-operation contract (pre/post/error/properties)
BranchSpec         every decision point that white-box tests must cover
Contract           the full contract for a configured input limit
build_contract()   constructs a Contract for a given limit
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from models import CalculationResult, ErrorKind, ValidationOutcome
from modexp import DEFAULT_LIMIT, is_non_negative_integer_string


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    """Inputs that must fail.

    Validator failures are reported as an ErrorKind on the outcome;
    engine precondition violations raise ``exception``.
    """

    name: str
    description: str
    trigger: Callable[..., bool]
    kind: ErrorKind | None = None
    exception: type[Exception] | None = None


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free integer inputs the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationContract:
    name: str
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation this belongs to


@dataclass(frozen=True)
class Contract:
    """Complete contract for the core under one input limit."""

    limit: int
    operations: dict[str, OperationContract]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    @property
    def branch_ids(self) -> set[str]:
        return {b.id for b in self.branches}


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def _well_formed(*raws: str) -> bool:
    return all(
        isinstance(r, str) and is_non_negative_integer_string(r.strip())
        for r in raws
    )


def prefix_values(a: int, n: int, m: int) -> list[int]:
    """Reference accumulator values: ``a^prefix mod m`` for each bit prefix."""
    if n == 0:
        return [1 % m]
    binary = format(n, "b")
    return [pow(a, int(binary[: i + 1], 2), m) for i in range(len(binary))]


# BRANCHES is independent of the limit, so it lives at module level.
BRANCHES: list[BranchSpec] = [
    # validate_and_parse
    BranchSpec(
        "PARSE-FORMAT",
        "A field is empty or not all ASCII digits after trimming",
        "not re.fullmatch('[0-9]+', raw.strip())",
        "validate_and_parse",
    ),
    BranchSpec(
        "PARSE-AGGREGATE",
        "Integer conversion failed for a reason other than format",
        "int(digits) raised ValueError",
        "validate_and_parse",
    ),
    BranchSpec(
        "RANGE-DIGITS",
        "A field has more significant digits than the limit",
        "len(digits.lstrip('0')) > len(str(limit))",
        "validate_and_parse",
    ),
    BranchSpec(
        "RANGE-VALUE",
        "A parsed value reaches the limit",
        "a >= limit or n >= limit or m >= limit",
        "validate_and_parse",
    ),
    BranchSpec(
        "MODULUS-ZERO",
        "Modulus is zero",
        "m == 0",
        "validate_and_parse",
    ),
    BranchSpec(
        "INPUT-VALID",
        "All checks passed",
        "well formed and in range and m > 0",
        "validate_and_parse",
    ),
    # calculate
    BranchSpec(
        "EXP-ZERO",
        "Zero exponent short-circuits to a single step",
        "n == 0",
        "calculate",
    ),
    BranchSpec(
        "EXP-INITIAL",
        "Leading bit seeds the accumulator with a mod m",
        "n > 0",
        "calculate",
    ),
    BranchSpec(
        "EXP-SQUARE",
        "Bit 0 squares the accumulator",
        "bit == 0",
        "calculate",
    ),
    BranchSpec(
        "EXP-SQUARE-MULTIPLY",
        "Bit 1 squares the accumulator and multiplies by a",
        "bit == 1",
        "calculate",
    ),
]


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(limit: int = DEFAULT_LIMIT) -> Contract:
    """Construct the full contract for validator and engine under ``limit``."""

    def _in_range(*values: int) -> bool:
        return all(0 <= v < limit for v in values)

    def _ints(*raws: str) -> list[int]:
        return [int(r.strip()) for r in raws]

    # -------------------------------------------------- validate_and_parse
    validate_contract = OperationContract(
        name="validate_and_parse",
        preconditions=[],
        postconditions=[
            Postcondition(
                "exactly_one_channel",
                "Outcome carries an error or parsed values, never both",
                lambda a, n, m, out: (out.error is None) != (out.parsed is None),
            ),
            Postcondition(
                "parsed_within_limit",
                "Parsed values lie in [0, limit) and m > 0",
                lambda a, n, m, out: (
                    out.parsed is None
                    or (
                        _in_range(out.parsed.a, out.parsed.n, out.parsed.m)
                        and out.parsed.m > 0
                    )
                ),
            ),
            Postcondition(
                "parsed_preserves_value",
                "Parsed values equal the decimal value of the trimmed input",
                lambda a, n, m, out: (
                    out.parsed is None
                    or [out.parsed.a, out.parsed.n, out.parsed.m] == _ints(a, n, m)
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "invalid_format",
                "Non-digit or empty field is rejected as invalid format",
                lambda a, n, m: not _well_formed(a, n, m),
                kind=ErrorKind.INVALID_FORMAT,
            ),
            ErrorCondition(
                "out_of_range",
                "A value at or above the limit is rejected",
                lambda a, n, m: (
                    _well_formed(a, n, m) and not _in_range(*_ints(a, n, m))
                ),
                kind=ErrorKind.OUT_OF_RANGE,
            ),
            ErrorCondition(
                "zero_modulus",
                "m == 0 is rejected once everything else is valid",
                lambda a, n, m: (
                    _well_formed(a, n, m)
                    and _in_range(*_ints(a, n, m))
                    and _ints(m)[0] == 0
                ),
                kind=ErrorKind.ZERO_MODULUS,
            ),
        ],
        properties=[],
    )

    # ---------------------------------------------------------- calculate
    calculate_contract = OperationContract(
        name="calculate",
        preconditions=[
            Precondition(
                "modulus_positive",
                "m > 0",
                lambda a, n, m: m > 0,
            ),
            Precondition(
                "non_negative",
                "a >= 0 and n >= 0",
                lambda a, n, m: a >= 0 and n >= 0,
            ),
        ],
        postconditions=[
            Postcondition(
                "result_in_range",
                "0 <= result < m",
                lambda a, n, m, r: 0 <= r.result < m,
            ),
            Postcondition(
                "result_correct",
                "result == pow(a, n, m)",
                lambda a, n, m, r: r.result == pow(a, n, m),
            ),
            Postcondition(
                "steps_match_bits",
                "One step per bit",
                lambda a, n, m, r: len(r.steps) == len(r.bits),
            ),
            Postcondition(
                "last_step_is_result",
                "Final step value equals the result",
                lambda a, n, m, r: r.steps[-1].value == r.result,
            ),
            Postcondition(
                "binary_str_is_base2",
                "binary_str is n in base 2 without leading zeros",
                lambda a, n, m, r: r.binary_str == format(n, "b"),
            ),
            Postcondition(
                "prefix_invariant",
                "Each step holds a^prefix mod m for the bits read so far",
                lambda a, n, m, r: [s.value for s in r.steps] == prefix_values(a, n, m),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "non_positive_modulus",
                "ValueError when m <= 0",
                lambda a, n, m: m <= 0,
                exception=ValueError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "idempotence", "calculate(a, n, m) == calculate(a, n, m)", 3,
                lambda calc, a, n, m: calc(a, n, m) == calc(a, n, m),
            ),
            AlgebraicProperty(
                "unit_modulus", "calculate(a, n, 1).result == 0", 2,
                lambda calc, a, n: calc(a, n, 1).result == 0,
            ),
            AlgebraicProperty(
                "zero_exponent", "calculate(a, 0, m).result == 1 mod m", 2,
                lambda calc, a, m: m == 0 or calc(a, 0, m).result == 1 % m,
            ),
            AlgebraicProperty(
                "base_reduction", "calculate(a + m, n, m) == calculate(a, n, m)", 3,
                lambda calc, a, n, m: (
                    m == 0 or calc(a + m, n, m).result == calc(a, n, m).result
                ),
            ),
            AlgebraicProperty(
                "exponent_sum",
                "a^(n1 + n2) == a^n1 * a^n2 (mod m)", 4,
                lambda calc, a, n1, n2, m: (
                    m == 0
                    or calc(a, n1 + n2, m).result
                    == calc(a, n1, m).result * calc(a, n2, m).result % m
                ),
            ),
        ],
    )

    return Contract(
        limit=limit,
        operations={
            "validate_and_parse": validate_contract,
            "calculate": calculate_contract,
        },
        branches=list(BRANCHES),
    )


def check_result(a: int, n: int, m: int, result: CalculationResult) -> list[str]:
    """Names of the calculate postconditions that ``result`` violates."""
    contract = build_contract()
    return [
        post.name
        for post in contract.operations["calculate"].postconditions
        if not post.check(a, n, m, result)
    ]


def check_outcome(a: str, n: str, m: str, outcome: ValidationOutcome,
                  limit: int = DEFAULT_LIMIT) -> list[str]:
    """Names of the validate_and_parse postconditions that ``outcome`` violates."""
    contract = build_contract(limit)
    return [
        post.name
        for post in contract.operations["validate_and_parse"].postconditions
        if not post.check(a, n, m, outcome)
    ]
