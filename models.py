"""Data models for the fast modular exponentiation tracer.

A calculation flows through three shapes:

- InputState         raw, unvalidated strings (query string, form, CLI args)
- ParsedInputs       canonical non-negative integers accepted by the validator
- CalculationResult  the bit-by-bit trace produced by the engine

All models are frozen.  Integers are plain Python ``int`` so arithmetic
is exact at any magnitude.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


Bit = Literal[0, 1]


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class InputState(BaseModel):
    """Raw input strings exactly as a user or URL supplied them."""

    model_config = ConfigDict(frozen=True)

    a: str = ""
    n: str = ""
    m: str = ""


class ParsedInputs(BaseModel):
    """Validated inputs: ``0 <= a, n, m < limit`` and ``m > 0``."""

    model_config = ConfigDict(frozen=True)

    a: int = Field(..., ge=0)
    n: int = Field(..., ge=0)
    m: int = Field(..., gt=0)


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------

class ErrorKind(str, Enum):
    INVALID_FORMAT = "invalid_format"
    OUT_OF_RANGE = "out_of_range"
    ZERO_MODULUS = "zero_modulus"


class InputError(BaseModel):
    """A user-facing validation failure."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = Field(..., min_length=1)


class ValidationOutcome(BaseModel):
    """Result of validating a raw input triple.

    Exactly one of ``error`` and ``parsed`` is set.
    """

    model_config = ConfigDict(frozen=True)

    error: InputError | None = None
    parsed: ParsedInputs | None = None

    @model_validator(mode="after")
    def exactly_one_channel(self) -> ValidationOutcome:
        if (self.error is None) == (self.parsed is None):
            raise ValueError("Exactly one of error or parsed must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.parsed is not None


# ---------------------------------------------------------------------------
# Calculation trace
# ---------------------------------------------------------------------------

class StepKind(str, Enum):
    """Which arithmetic produced a step's value."""

    ZERO_EXPONENT = "zero_exponent"
    INITIAL = "initial"
    SQUARE = "square"
    SQUARE_MULTIPLY = "square_multiply"


class CalculationStep(BaseModel):
    """Accumulator state after processing one exponent bit."""

    model_config = ConfigDict(frozen=True)

    bit: Bit
    value: int = Field(..., ge=0)
    operation: str = Field(..., min_length=1)
    kind: StepKind


class CalculationResult(BaseModel):
    """Full trace of a fast exponentiation run, most significant bit first."""

    model_config = ConfigDict(frozen=True)

    bits: tuple[Bit, ...] = Field(..., min_length=1)
    steps: tuple[CalculationStep, ...] = Field(..., min_length=1)
    binary_str: str = Field(..., pattern=r"^[01]+$")
    result: int = Field(..., ge=0)

    @model_validator(mode="after")
    def trace_is_consistent(self) -> CalculationResult:
        if len(self.steps) != len(self.bits):
            raise ValueError(
                f"steps ({len(self.steps)}) and bits ({len(self.bits)}) "
                "must have the same length"
            )
        if self.binary_str != "".join(str(b) for b in self.bits):
            raise ValueError("binary_str must spell out bits")
        if any(s.bit != b for s, b in zip(self.steps, self.bits)):
            raise ValueError("each step must carry its own bit")
        if self.steps[-1].value != self.result:
            raise ValueError("result must equal the last step's value")
        return self

    @property
    def bit_count(self) -> int:
        return len(self.bits)

    @property
    def values(self) -> list[int]:
        return [s.value for s in self.steps]
