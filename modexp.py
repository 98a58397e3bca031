"""Fast modular exponentiation with a step-by-step trace.

Two pure functions make up the core:

validate_and_parse  raw strings -> ValidationOutcome (never raises)
calculate           (a, n, m)   -> CalculationResult

The engine evaluates ``a^n mod m`` left to right over the binary
expansion of ``n``.  After each bit the accumulator holds
``a^prefix mod m`` where ``prefix`` is the bits read so far.  Python's
``int`` is arbitrary precision, so intermediate products like
``a * v * v`` never overflow.

Decision branches are annotated with their branch ids (see
contract.BRANCHES) so white-box tests can trace coverage back to them.
"""

from __future__ import annotations

import re

from models import (
    Bit,
    CalculationResult,
    CalculationStep,
    ErrorKind,
    InputError,
    ParsedInputs,
    StepKind,
    ValidationOutcome,
)

# Bounds the rendered trace length, not a mathematical requirement.
DEFAULT_LIMIT = 2**24

AGGREGATE_FORMAT_MESSAGE = "All inputs must be valid integers"
ZERO_MODULUS_MESSAGE = "Modulus (m) must be greater than 0"

_DIGITS = re.compile(r"[0-9]+")


class InputFormatError(ValueError):
    """Raised when a raw field is not a non-negative decimal integer."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} must be a non-negative integer.")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def is_non_negative_integer_string(s: str) -> bool:
    """True if ``s`` is one or more ASCII digits.  Does not trim."""
    return _DIGITS.fullmatch(s) is not None


def _significant_digits(raw: str, field: str) -> str:
    if not isinstance(raw, str):
        raise InputFormatError(field)
    s = raw.strip()
    if not is_non_negative_integer_string(s):
        raise InputFormatError(field)
    return s.lstrip("0") or "0"


def parse_strict(raw: str, field: str = "value") -> int:
    """Parse a trimmed, digits-only string as an exact base-10 ``int``.

    >>> parse_strict(" 0012 ", "a")
    12
    """
    return int(_significant_digits(raw, field), 10)


def max_decimal_digits(limit: int) -> int:
    """Upper bound on the decimal digit count of ``limit``.

    Derived from ``bit_length`` so limits too large for ``str()`` still work.
    0.30103 rounds log10(2) up, so the bound never undercounts.
    """
    return limit.bit_length() * 30103 // 100000 + 1


def out_of_range_message(limit: int) -> str:
    # Wide power-of-two limits print as 2^k; str() refuses very long ints.
    if limit.bit_length() > 65 and limit & (limit - 1) == 0:
        return f"All inputs must be less than 2^{limit.bit_length() - 1}."
    return f"All inputs must be less than {limit}."


def validate_and_parse(
    a_raw: str,
    n_raw: str,
    m_raw: str,
    *,
    limit: int = DEFAULT_LIMIT,
) -> ValidationOutcome:
    """Validate three raw strings and convert them to integers.

    Checks run in a fixed order: format of a, n, m (first failure wins),
    then the ``limit`` ceiling, then ``m > 0``.  Every failure is
    returned as an InputError; this function does not raise.

    Branches: PARSE-FORMAT, PARSE-AGGREGATE, RANGE-DIGITS, RANGE-VALUE,
              MODULUS-ZERO, INPUT-VALID
    """
    max_digits = max_decimal_digits(limit)
    try:
        digits = [
            _significant_digits(a_raw, "a"),
            _significant_digits(n_raw, "n"),
            _significant_digits(m_raw, "m"),
        ]
        # More digits than the limit can have means the value is larger.
        if any(len(d) > max_digits for d in digits):          # RANGE-DIGITS
            return _failure(ErrorKind.OUT_OF_RANGE, out_of_range_message(limit))
        a, n, m = (int(d, 10) for d in digits)
    except InputFormatError as e:                             # PARSE-FORMAT
        return _failure(ErrorKind.INVALID_FORMAT, str(e))
    except ValueError:                                        # PARSE-AGGREGATE
        return _failure(ErrorKind.INVALID_FORMAT, AGGREGATE_FORMAT_MESSAGE)

    if a >= limit or n >= limit or m >= limit:                # RANGE-VALUE
        return _failure(ErrorKind.OUT_OF_RANGE, out_of_range_message(limit))

    if m == 0:                                                # MODULUS-ZERO
        return _failure(ErrorKind.ZERO_MODULUS, ZERO_MODULUS_MESSAGE)

    return ValidationOutcome(parsed=ParsedInputs(a=a, n=n, m=m))  # INPUT-VALID


def _failure(kind: ErrorKind, message: str) -> ValidationOutcome:
    return ValidationOutcome(error=InputError(kind=kind, message=message))


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def to_bits(n: int) -> tuple[Bit, ...]:
    """Binary expansion of ``n``, most significant bit first."""
    return tuple(1 if c == "1" else 0 for c in format(n, "b"))


def calculate(a: int, n: int, m: int) -> CalculationResult:
    """Compute ``a^n mod m`` and record one step per exponent bit.

    ``a^0`` is taken to be 1 for every ``a``, including ``0^0``.

    Branches: EXP-ZERO, EXP-INITIAL, EXP-SQUARE, EXP-SQUARE-MULTIPLY
    """
    if m <= 0:
        raise ValueError(f"modulus must be positive, got {m}")
    if a < 0 or n < 0:
        raise ValueError(f"base and exponent must be non-negative, got a={a}, n={n}")

    if n == 0:                                                # EXP-ZERO
        one = 1 % m
        return CalculationResult(
            bits=(0,),
            steps=(
                CalculationStep(
                    bit=0, value=one, operation="a^0 = 1",
                    kind=StepKind.ZERO_EXPONENT,
                ),
            ),
            binary_str="0",
            result=one,
        )

    bits = to_bits(n)
    value = a % m
    steps = [                                                 # EXP-INITIAL
        CalculationStep(
            bit=bits[0], value=value, operation=f"a = {a}",
            kind=StepKind.INITIAL,
        )
    ]

    for bit in bits[1:]:
        prev = value
        if bit == 0:                                          # EXP-SQUARE
            value = prev * prev % m
            operation = f"({prev})^2 mod {m}"
            kind = StepKind.SQUARE
        else:                                                 # EXP-SQUARE-MULTIPLY
            value = a * prev * prev % m
            operation = f"({prev})^2 * {a} mod {m}"
            kind = StepKind.SQUARE_MULTIPLY
        steps.append(
            CalculationStep(bit=bit, value=value, operation=operation, kind=kind)
        )

    return CalculationResult(
        bits=bits,
        steps=tuple(steps),
        binary_str="".join(str(b) for b in bits),
        result=value,
    )


def trace(
    a_raw: str,
    n_raw: str,
    m_raw: str,
    *,
    limit: int = DEFAULT_LIMIT,
) -> tuple[ValidationOutcome, CalculationResult | None]:
    """Validate, then calculate only when validation succeeded."""
    outcome = validate_and_parse(a_raw, n_raw, m_raw, limit=limit)
    if outcome.parsed is None:
        return outcome, None
    p = outcome.parsed
    return outcome, calculate(p.a, p.n, p.m)
