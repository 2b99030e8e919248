from __future__ import annotations

import pytest

from lagging.calculations import (
    calculate_rate,
    calculate_severity_rate,
    estimate_indirect_damage,
    recalculate,
    rescale_ratio,
)
from lagging.models import InvalidConstantError, NormalizationConstant, Triple, YearSummary
from third_party.safety_api.transforms import normalize_summary


def test_reference_constant_is_a_no_op(raw_summary):
    summary = normalize_summary(raw_summary, 2023)
    adjusted = recalculate(summary, 200000)
    assert adjusted.ltir == summary.ltir
    assert adjusted.trir == summary.trir


def test_million_hours_scales_each_field_by_five(raw_summary):
    summary = normalize_summary(raw_summary, 2023)
    adjusted = recalculate(summary, NormalizationConstant.HOURS_1M)
    assert adjusted.ltir.total == pytest.approx(summary.ltir.total * 5)
    assert adjusted.ltir.employee == pytest.approx(summary.ltir.employee * 5)
    assert adjusted.ltir.contractor == pytest.approx(summary.ltir.contractor * 5)
    assert adjusted.trir.total == pytest.approx(summary.trir.total * 5)


@pytest.mark.parametrize("constant", [200000, 1000000])
def test_severity_rate_is_constant_invariant(constant):
    summary = YearSummary(year=2023, severity_rate=Triple(total=0.8, employee=0.5, contractor=1.1))
    assert summary.ltir.total == 0
    adjusted = recalculate(summary, constant)
    assert adjusted.severity_rate == summary.severity_rate
    assert adjusted.ltir.total == 0


def test_recalculate_returns_new_summary_without_mutating(raw_summary):
    summary = normalize_summary(raw_summary, 2023)
    before = summary.model_dump()
    adjusted = recalculate(summary, 1000000)
    assert adjusted is not summary
    assert summary.model_dump() == before
    assert adjusted.accident_count == summary.accident_count
    assert adjusted.site_accident_counts == summary.site_accident_counts


@pytest.mark.parametrize("bad", [0, 100000, 500000, "abc", None])
def test_invalid_constant_is_rejected(bad):
    with pytest.raises(InvalidConstantError):
        recalculate(YearSummary.empty(2023), bad)


def test_constant_accepts_numeric_strings():
    assert rescale_ratio("1000000") == 5


def test_calculate_rate():
    assert calculate_rate(2, 400000) == pytest.approx(1.0)
    assert calculate_rate(2, 400000, 1000000) == pytest.approx(5.0)
    assert calculate_rate(3, 0) == 0


def test_calculate_severity_rate():
    assert calculate_severity_rate(120, 400000) == pytest.approx(0.3)
    assert calculate_severity_rate(10, 0) == 0


def test_estimate_indirect_damage():
    assert estimate_indirect_damage(500000) == 2000000


def test_recalculated_site_counts_are_independent_of_source(raw_summary):
    summary = normalize_summary(raw_summary, 2023)
    adjusted = recalculate(summary, 1000000)
    adjusted.site_accident_counts["Ulsan"] = 99
    assert summary.site_accident_counts["Ulsan"] == 3


@pytest.mark.parametrize("bad", [200000.7, "200000.5", True, float("nan")])
def test_non_integral_constant_is_rejected(bad):
    with pytest.raises(InvalidConstantError):
        NormalizationConstant.parse(bad)


def test_integral_float_constant_is_accepted():
    assert NormalizationConstant.parse(1000000.0) is NormalizationConstant.HOURS_1M
