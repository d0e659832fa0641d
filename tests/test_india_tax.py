"""
Tests for the Indian income tax calculator.
"""
import pytest
from tax.calculator import calculate_tax, get_tax_calculator
from tax.india import IndiaTaxCalculator
from tax.loader import TaxTableLoader
from tax.models import AgeGroup, Country, IndiaTaxInput, TaxRegime


def make_calculator() -> IndiaTaxCalculator:
    profile = TaxTableLoader().load_country(Country.INDIA, 2024)
    assert profile is not None
    return IndiaTaxCalculator(profile)


def test_old_regime_without_deductions():
    """600,000 under the old regime owes 32,500 plus 4% cess."""
    calculator = make_calculator()
    result = calculator.calculate(IndiaTaxInput(gross_income=600000, regime=TaxRegime.OLD))

    assert result.taxable_income == 600000
    assert result.federal_tax == 32500
    assert result.rebate == 0
    assert result.surcharge == 0
    assert result.cess == 1300
    assert result.total_tax == 33800
    assert result.net_income == 600000 - 33800
    assert abs(result.effective_tax_rate - 33800 / 600000) < 1e-6
    assert result.marginal_rate == 0.2


def test_old_regime_deductions_are_capped_individually():
    """Each named deduction is clipped to its own cap; unknown names are ignored."""
    calculator = make_calculator()
    result = calculator.calculate(IndiaTaxInput(
        gross_income=1000000,
        regime=TaxRegime.OLD,
        deductions={
            "standard_deduction": 50000,
            "section_80c": 200000,  # capped at 150,000
            "health_insurance": 30000,  # capped at 25,000
            "lottery_tickets": 90000,
        }
    ))

    assert result.deductions_applied == 225000
    assert result.taxable_income == 775000
    assert result.federal_tax == 67500
    assert result.cess == 2700
    assert result.total_tax == 70200


def test_education_loan_interest_has_no_cap():
    calculator = make_calculator()
    result = calculator.calculate(IndiaTaxInput(
        gross_income=2000000,
        regime=TaxRegime.OLD,
        deductions={"education_loan_interest": 400000}
    ))
    assert result.deductions_applied == 400000
    assert result.taxable_income == 1600000


def test_new_regime_uses_flat_standard_deduction():
    """The new regime ignores claimed deductions and applies its own standard deduction."""
    calculator = make_calculator()
    result = calculator.calculate(IndiaTaxInput(
        gross_income=1200000,
        regime=TaxRegime.NEW,
        deductions={"section_80c": 150000, "nps": 50000}
    ))

    assert result.deductions_applied == 75000
    assert result.taxable_income == 1125000
    assert result.federal_tax == 68750
    assert result.cess == 2750
    assert result.total_tax == 71500


def test_rebate_zeroes_tax_below_threshold():
    """Slab tax is rebated in full at or below the regime threshold."""
    calculator = make_calculator()

    old = calculator.calculate(IndiaTaxInput(gross_income=500000, regime=TaxRegime.OLD))
    assert old.federal_tax == 12500
    assert old.rebate == 12500
    assert old.total_tax == 0

    new = calculator.calculate(IndiaTaxInput(gross_income=775000, regime=TaxRegime.NEW))
    assert new.taxable_income == 700000
    assert new.federal_tax == 20000
    assert new.rebate == 20000
    assert new.total_tax == 0

    # One rupee over the threshold loses the rebate
    over = calculator.calculate(IndiaTaxInput(gross_income=500001, regime=TaxRegime.OLD))
    assert over.rebate == 0
    assert over.total_tax > 0


def test_age_group_shifts_basic_exemption():
    """Seniors and super seniors get higher basic exemptions under the old regime."""
    calculator = make_calculator()
    taxes = {}
    for group in AgeGroup:
        result = calculator.calculate(IndiaTaxInput(
            gross_income=800000, regime=TaxRegime.OLD, age_group=group
        ))
        taxes[group] = result.federal_tax

    assert taxes[AgeGroup.BELOW_60] == 72500
    assert taxes[AgeGroup.SENIOR] == 70000
    assert taxes[AgeGroup.SUPER_SENIOR] == 60000

    # Age does not matter under the new regime
    young = calculator.calculate(IndiaTaxInput(gross_income=800000, age_group=AgeGroup.BELOW_60))
    old = calculator.calculate(IndiaTaxInput(gross_income=800000, age_group=AgeGroup.SUPER_SENIOR))
    assert young.total_tax == old.total_tax


def test_surcharge_and_cess_above_five_million():
    """A 10% surcharge applies above 5,000,000 and cess is charged on tax plus surcharge."""
    calculator = make_calculator()
    result = calculator.calculate(IndiaTaxInput(gross_income=6000000, regime=TaxRegime.OLD))

    assert result.federal_tax == 1612500
    assert result.surcharge == 161250
    assert result.cess == 70950
    assert result.total_tax == 1844700


def test_new_regime_surcharge_is_capped():
    """The 37% tier is capped at 25% under the new regime."""
    calculator = make_calculator()

    new = calculator.calculate(IndiaTaxInput(gross_income=60075000, regime=TaxRegime.NEW))
    assert new.taxable_income == 60000000
    assert abs(new.surcharge - new.federal_tax * 0.25) < 0.01

    old = calculator.calculate(IndiaTaxInput(gross_income=60000000, regime=TaxRegime.OLD))
    assert abs(old.surcharge - old.federal_tax * 0.37) < 0.01


def test_capital_gains_taxed_outside_slabs():
    """Short-term gains at 20%, long-term gains at 12.5% above the exemption."""
    calculator = make_calculator()
    result = calculator.calculate(IndiaTaxInput(
        gross_income=0,
        short_term_capital_gains=100000,
        long_term_capital_gains=225000
    ))

    assert result.taxable_income == 0
    assert result.capital_gains_tax == 32500
    assert result.cess == 0
    assert result.total_tax == 32500
    assert result.gross_income == 325000

    exempt = calculator.calculate(IndiaTaxInput(long_term_capital_gains=125000))
    assert exempt.capital_gains_tax == 0


def test_regions_are_optional_but_checked():
    """India is taxed nationally; a given state must still be known."""
    calculator = make_calculator()

    assert calculator.calculate(IndiaTaxInput(gross_income=900000)) is not None
    assert calculator.calculate(IndiaTaxInput(gross_income=900000, region="Karnataka")).region == "Karnataka"
    assert calculator.calculate(IndiaTaxInput(gross_income=900000, region="Atlantis")) is None


def test_compare_regimes():
    """Heavy deductions favour the old regime; none favour the new one."""
    calculator = make_calculator()

    heavy = calculator.compare_regimes(IndiaTaxInput(
        gross_income=1500000,
        deductions={
            "standard_deduction": 50000,
            "section_80c": 150000,
            "nps": 50000,
            "health_insurance": 25000,
            "home_loan_interest": 200000,
        }
    ))
    assert heavy.recommended_regime == TaxRegime.OLD
    assert heavy.savings == pytest.approx(heavy.new_regime.total_tax - heavy.old_regime.total_tax)

    light = calculator.compare_regimes(IndiaTaxInput(gross_income=1500000))
    assert light.recommended_regime == TaxRegime.NEW
    assert light.savings > 0


def test_calculate_tax_accepts_plain_dicts():
    """The dispatcher takes display names and dict inputs."""
    result = calculate_tax("India", {"gross_income": 600000, "regime": "old"}, year=2024)
    assert result.total_tax == 33800
    assert result.country == Country.INDIA

    assert get_tax_calculator("india", year=2024).country == Country.INDIA
