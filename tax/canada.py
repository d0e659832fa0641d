"""
Canadian income tax: federal and provincial brackets plus CPP and EI.
"""
from .base import BaseTaxCalculator
from .engine import bracket_breakdown, compute_bracket_tax, marginal_rate
from .models import CanadaTaxInput, CanadaTaxProfile, Country, TaxComputationResult


class CanadaTaxCalculator(BaseTaxCalculator):
    """Calculator for Canadian income tax and payroll deductions."""

    country = Country.CANADA
    input_model = CanadaTaxInput

    def __init__(self, profile: CanadaTaxProfile):
        super().__init__(profile)
        self.cpp_ei = profile.cpp_ei

    def _calculate(self, inputs: CanadaTaxInput) -> TaxComputationResult:
        province = self._resolve_region(inputs.region)
        provincial_brackets = self.profile.provincial[province]

        total_income = self._total_income(inputs)
        rrsp = self._rrsp_deduction(inputs)
        itemized = 0.0
        if inputs.use_itemized_deductions:
            itemized = sum(max(0.0, amount) for amount in inputs.deductions.values())
        deductions = rrsp + itemized
        taxable_income = max(0.0, total_income - deductions)

        # Both levels tax the same taxable income independently
        federal_tax = compute_bracket_tax(taxable_income, self.profile.federal)
        provincial_tax = compute_bracket_tax(taxable_income, provincial_brackets)

        cpp_contrib = self._calculate_cpp_contribution(
            inputs.gross_income + inputs.self_employment_income
        )
        ei_contrib = self._calculate_ei_contribution(inputs.gross_income)

        total_tax = federal_tax + provincial_tax + cpp_contrib + ei_contrib
        gross_income = (
            inputs.gross_income
            + inputs.self_employment_income
            + inputs.other_income
            + inputs.capital_gains
            + inputs.eligible_dividends
        )

        return self._build_result(
            region=province,
            gross_income=gross_income,
            total_tax=total_tax,
            federal_breakdown=bracket_breakdown(taxable_income, self.profile.federal),
            regional_breakdown=bracket_breakdown(taxable_income, provincial_brackets),
            marginal_rate=(
                marginal_rate(taxable_income, self.profile.federal)
                + marginal_rate(taxable_income, provincial_brackets)
            ),
            total_income=total_income,
            deductions_applied=deductions,
            taxable_income=taxable_income,
            federal_tax=federal_tax,
            regional_tax=provincial_tax,
            cpp_contribution=cpp_contrib,
            ei_contribution=ei_contrib
        )

    def _total_income(self, inputs: CanadaTaxInput) -> float:
        """Aggregate income with the capital gains inclusion and dividend gross-up."""
        return (
            inputs.gross_income
            + inputs.self_employment_income
            + inputs.other_income
            + inputs.capital_gains * self.profile.capital_gains_inclusion_rate
            + inputs.eligible_dividends * self.profile.eligible_dividend_gross_up
        )

    def _rrsp_deduction(self, inputs: CanadaTaxInput) -> float:
        """RRSP contribution limited by the dollar limit and earned income room."""
        earned_income = max(0.0, inputs.gross_income + inputs.self_employment_income)
        room = min(
            self.profile.rrsp_dollar_limit,
            earned_income * self.profile.rrsp_earned_income_rate
        )
        return self._cap(inputs.rrsp_contribution, room)

    def _calculate_cpp_contribution(self, income: float) -> float:
        """Calculate CPP contribution for the year."""
        cpp_data = self.cpp_ei

        # Pensionable earnings = income - basic exemption, capped at YMPE less the exemption
        pensionable_earnings = max(0.0, income - cpp_data.cpp_basic_exemption)
        pensionable_earnings = min(
            pensionable_earnings, cpp_data.cpp_ympe - cpp_data.cpp_basic_exemption
        )

        return pensionable_earnings * cpp_data.cpp_rate

    def _calculate_ei_contribution(self, income: float) -> float:
        """Calculate EI premium for the year."""
        ei_data = self.cpp_ei

        # Insurable earnings capped at MIE
        insurable_earnings = min(max(0.0, income), ei_data.ei_mie)
        return insurable_earnings * ei_data.ei_rate
