import pytest
from dataclasses import replace

from icusim.physiology.renal import (
    calculate_bun_creatinine_ratio, calculate_fena, gfr_multiplier, is_oliguric,
    simulate_renal_perfusion, stage_aki, stage_gfr,
)


@pytest.fixture
def renal(baseline):
    return baseline.renal


def test_fena():
    # (20 * 2) / (140 * 100) * 100
    assert calculate_fena(20, 2.0, 140, 100) == pytest.approx(0.2857, rel=1e-3)
    assert calculate_fena(20, 2.0, 0, 100) == 0.0


def test_bun_creatinine_ratio():
    assert calculate_bun_creatinine_ratio(15, 1.0) == 15
    assert calculate_bun_creatinine_ratio(15, 0) == 0.0


class TestRenalPerfusion:

    def test_normal_perfusion(self, renal):
        out = simulate_renal_perfusion(renal, 93, 5.0)
        assert out.gfr == pytest.approx(90.0)
        assert out.urine_output == pytest.approx(72.0)
        # Full recompute, not carried over from the baseline 1.0
        assert out.creatinine == pytest.approx(100 / 90)

    @pytest.mark.parametrize("map, co", [(65, 4.0), (100, 6.0), (140, 4.0), (80, 11.0)])
    def test_autoregulated_floor(self, renal, map, co):
        assert gfr_multiplier(map, co) == 1.0
        assert simulate_renal_perfusion(renal, map, co).gfr == pytest.approx(renal.gfr)

    def test_hypotension(self, renal):
        out = simulate_renal_perfusion(renal, 52, 5.0)
        assert out.gfr == pytest.approx(72.0)
        assert out.urine_output == pytest.approx(57.6)
        assert out.creatinine == pytest.approx(100 / 72)

    def test_low_output_compounds(self, renal):
        out = simulate_renal_perfusion(renal, 52, 2.0)
        assert out.gfr == pytest.approx(36.0)

    def test_clamped(self, renal):
        out = simulate_renal_perfusion(replace(renal, gfr=15), 10, 1.0)
        assert out.gfr == 10.0
        assert out.urine_output == 10.0
        assert out.creatinine == 8.0
        high = simulate_renal_perfusion(replace(renal, gfr=500), 90, 5.0)
        assert high.gfr == 120.0
        assert high.creatinine == pytest.approx(0.8333, rel=1e-3)

    def test_other_fields_untouched(self, renal):
        out = simulate_renal_perfusion(renal, 52, 2.0)
        assert out.bun == renal.bun
        assert out.fractional_excretion_na == renal.fractional_excretion_na


@pytest.mark.parametrize("gfr, category", [
    (95, "G1"), (90, "G1"), (75, "G2"), (50, "G3a"), (35, "G3b"), (20, "G4"), (10, "G5"),
])
def test_gfr_stage(gfr, category):
    assert stage_gfr(gfr).category == category


def test_aki_stages(renal):
    assert stage_aki(renal) is None
    assert stage_aki(replace(renal, creatinine=1.6)) == "AKI Stage 1"
    assert stage_aki(replace(renal, urine_output=25)) == "AKI Stage 2"
    assert stage_aki(replace(renal, creatinine=3.5)) == "AKI Stage 3"


def test_oliguria(renal):
    assert not is_oliguric(renal)
    assert is_oliguric(replace(renal, urine_output=20))
