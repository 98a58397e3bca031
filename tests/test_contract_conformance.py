"""Contract conformance tests.

These tests are *driven by* ``contract.build_contract``: they iterate
over every postcondition, error condition and algebraic property it
defines and verify the implementation satisfies them.

If the contract grows (e.g. a new postcondition is added), these tests
cover it automatically.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from contract import build_contract, check_outcome, check_result, prefix_values
from modexp import calculate, validate_and_parse
from validation.counterexample_search import run_search

# ---------------------------------------------------------------------------
# Configuration -- a small limit so exhaustive checks are fast
# ---------------------------------------------------------------------------

LIMIT = 16
CONTRACT = build_contract(LIMIT)
small = st.integers(min_value=0, max_value=LIMIT - 1)
small_moduli = st.integers(min_value=1, max_value=LIMIT - 1)
raw_fields = st.one_of(
    small.map(str),
    st.sampled_from(["", " ", "16", "017", "-1", "x", "1.0", " 9 "]),
)


# ===================================================================
# POSTCONDITIONS
# ===================================================================

class TestPostconditions:

    @given(a=small, n=small, m=small_moduli)
    @settings(max_examples=300)
    def test_calculate_postconditions(self, a, n, m):
        result = calculate(a, n, m)
        for post in CONTRACT.operations["calculate"].postconditions:
            assert post.check(a, n, m, result), (
                f"Postcondition '{post.name}' failed: calculate({a}, {n}, {m})"
            )

    @given(a=raw_fields, n=raw_fields, m=raw_fields)
    @settings(max_examples=300)
    def test_validator_postconditions(self, a, n, m):
        outcome = validate_and_parse(a, n, m, limit=LIMIT)
        for post in CONTRACT.operations["validate_and_parse"].postconditions:
            assert post.check(a, n, m, outcome), (
                f"Postcondition '{post.name}' failed: validate({a!r}, {n!r}, {m!r})"
            )

    def test_check_helpers_report_nothing_for_correct_output(self):
        assert check_result(2, 23, 100, calculate(2, 23, 100)) == []
        assert check_outcome("2", "23", "100", validate_and_parse("2", "23", "100")) == []


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:

    @given(a=raw_fields, n=raw_fields, m=raw_fields)
    @settings(max_examples=300)
    def test_first_triggered_condition_decides_kind(self, a, n, m):
        outcome = validate_and_parse(a, n, m, limit=LIMIT)
        conditions = CONTRACT.operations["validate_and_parse"].error_conditions
        expected = next((ec.kind for ec in conditions if ec.trigger(a, n, m)), None)
        actual = outcome.error.kind if outcome.error is not None else None
        assert actual == expected

    @pytest.mark.parametrize(
        "ec",
        CONTRACT.operations["calculate"].error_conditions,
        ids=lambda ec: ec.name,
    )
    def test_engine_error_conditions_raise(self, ec):
        assert ec.trigger(3, 4, 0)
        with pytest.raises(ec.exception):
            calculate(3, 4, 0)


# ===================================================================
# ALGEBRAIC PROPERTIES -- exhaustive over a tiny domain
# ===================================================================

@pytest.mark.parametrize(
    "op_name,prop",
    CONTRACT.all_properties,
    ids=lambda p: getattr(p, "name", p),
)
def test_algebraic_property_exhaustive(op_name, prop):
    from itertools import product

    values = range(0, 6)
    for args in product(values, repeat=prop.arity):
        try:
            holds = prop.check(calculate, *args)
        except ValueError:
            continue  # m == 0 outside the engine's precondition
        assert holds, f"{op_name}.{prop.name} failed for {args}"


# ===================================================================
# CONTRACT SHAPE
# ===================================================================

class TestContractShape:

    def test_operations_present(self):
        assert set(CONTRACT.operations) == {"validate_and_parse", "calculate"}

    def test_limit_is_recorded(self):
        assert CONTRACT.limit == LIMIT
        assert build_contract().limit == 2**24

    def test_branch_ids_unique(self):
        ids = [b.id for b in CONTRACT.branches]
        assert len(ids) == len(set(ids)) == len(CONTRACT.branch_ids)

    def test_prefix_values_reference(self):
        assert prefix_values(2, 23, 100) == [2, 4, 32, 48, 8]
        assert prefix_values(9, 0, 5) == [1]


# ===================================================================
# COUNTEREXAMPLE SEARCH
# ===================================================================

class TestCounterexampleSearch:

    def test_small_domain_has_no_counterexamples(self):
        report = run_search(limit=LIMIT, max_value=4)
        assert report.passed, report.summary()
        assert report.checks_run > 0

    def test_summary_mentions_check_count(self):
        report = run_search(limit=LIMIT, max_value=2)
        assert f"Total checks: {report.checks_run}" in report.summary()
