import pytest
from dataclasses import replace

from icusim.core.enums import AcidBaseDisturbance, AnionGapStatus, Compensation
from icusim.physiology.acid_base import (
    analyze_acid_base, calculate_anion_gap, classify_anion_gap, simulate_electrolyte_change,
)


@pytest.fixture
def gas(baseline):
    """Build an ABG from the baseline with pH/PaCO2/HCO3 overridden."""
    def _gas(ph, paco2, hco3):
        return replace(baseline.abg, ph=ph, paco2=paco2, hco3=hco3)
    return _gas


def test_anion_gap():
    assert calculate_anion_gap(140, 104, 24) == 12
    assert calculate_anion_gap(140, 100, 10) == 30


@pytest.mark.parametrize("gap, status", [
    (13, AnionGapStatus.HIGH), (12, AnionGapStatus.NORMAL),
    (8, AnionGapStatus.NORMAL), (7.9, AnionGapStatus.LOW),
])
def test_anion_gap_categories(gap, status):
    assert classify_anion_gap(gap) == status


class TestPrimaryDisorders:

    def test_normal(self, baseline):
        a = analyze_acid_base(baseline.abg)
        assert a.primary == AcidBaseDisturbance.NORMAL
        assert a.compensation == Compensation.NONE
        assert a.expected_compensation is None

    def test_respiratory_acidosis_compensated(self, gas):
        a = analyze_acid_base(gas(7.28, 55, 26))
        assert a.primary == AcidBaseDisturbance.RESPIRATORY_ACIDOSIS
        assert a.compensation == Compensation.COMPLETE
        assert a.expected_compensation.parameter == "HCO3"
        assert a.expected_compensation.expected_value == pytest.approx(25.5)
        assert a.expected_compensation.actual_value == 26

    def test_respiratory_acidosis_partial(self, gas):
        a = analyze_acid_base(gas(7.25, 70, 25))
        # expected HCO3 27 > 25
        assert a.compensation == Compensation.PARTIAL

    def test_respiratory_acidosis_ungraded_without_rise(self, gas):
        a = analyze_acid_base(gas(7.25, 60, 24))
        assert a.primary == AcidBaseDisturbance.RESPIRATORY_ACIDOSIS
        assert a.compensation == Compensation.NONE

    def test_metabolic_acidosis_winters(self, gas):
        a = analyze_acid_base(gas(7.25, 30, 14))
        assert a.primary == AcidBaseDisturbance.METABOLIC_ACIDOSIS
        assert a.expected_compensation.expected_value == pytest.approx(28.0)
        assert a.compensation == Compensation.COMPLETE

    def test_metabolic_acidosis_partial(self, gas):
        a = analyze_acid_base(gas(7.20, 35, 14))
        assert a.compensation == Compensation.PARTIAL

    def test_respiratory_alkalosis(self, gas):
        a = analyze_acid_base(gas(7.50, 30, 22))
        assert a.primary == AcidBaseDisturbance.RESPIRATORY_ALKALOSIS
        assert a.compensation == Compensation.COMPLETE
        assert analyze_acid_base(gas(7.50, 30, 23.5)).compensation == Compensation.PARTIAL

    def test_metabolic_alkalosis(self, gas):
        a = analyze_acid_base(gas(7.50, 46, 34))
        assert a.primary == AcidBaseDisturbance.METABOLIC_ALKALOSIS
        assert a.expected_compensation.expected_value == pytest.approx(47.0)
        assert a.compensation == Compensation.COMPLETE
        assert analyze_acid_base(gas(7.50, 42, 34)).compensation == Compensation.PARTIAL

    def test_acidemia_without_cause_stays_normal(self, gas):
        a = analyze_acid_base(gas(7.30, 40, 24))
        assert a.primary == AcidBaseDisturbance.NORMAL


class TestMixedDisorders:

    def test_combined_acidosis(self, gas):
        a = analyze_acid_base(gas(7.20, 50, 18))
        assert a.primary == AcidBaseDisturbance.MIXED
        # Respiratory branch ran first; HCO3 never rose so nothing was graded.
        assert a.compensation == Compensation.NONE

    def test_combined_alkalosis(self, gas):
        a = analyze_acid_base(gas(7.55, 30, 28))
        assert a.primary == AcidBaseDisturbance.MIXED


class TestSimplifiedAnionGap:

    def test_uses_bicarbonate_only(self, baseline):
        # 0 - (0 + 24) = -24 -> Low, even though the full gap is a normal 12
        a = analyze_acid_base(baseline.abg)
        assert a.anion_gap == AnionGapStatus.LOW
        e = baseline.electrolytes
        assert classify_anion_gap(calculate_anion_gap(e.sodium, e.chloride, e.bicarbonate)) \
            == AnionGapStatus.NORMAL

    def test_pure(self, gas):
        g = gas(7.25, 30, 14)
        assert analyze_acid_base(g) == analyze_acid_base(g)


class TestElectrolyteChange:

    def test_bicarbonate_drop(self, baseline):
        e, abg = simulate_electrolyte_change(baseline.electrolytes, baseline.abg, bicarbonate=18)
        assert e.bicarbonate == 18
        assert e.anion_gap == pytest.approx(18)
        assert abg.hco3 == 18
        assert abg.ph == pytest.approx(7.40 - 6 * 0.012)
        assert abg.base_excess == -6

    def test_chloride_only_leaves_gas(self, baseline):
        e, abg = simulate_electrolyte_change(baseline.electrolytes, baseline.abg, chloride=110)
        assert e.anion_gap == pytest.approx(6)
        assert abg == baseline.abg

    def test_ph_clamped(self, baseline):
        _, abg = simulate_electrolyte_change(baseline.electrolytes, baseline.abg, bicarbonate=60)
        assert abg.ph == 7.6
