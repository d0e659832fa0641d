"""
US income tax: federal and state brackets, deductions, long-term capital
gains and credits.
"""
from .base import BaseTaxCalculator
from .engine import bracket_breakdown, compute_bracket_tax, marginal_rate, stacked_bracket_tax
from .models import Country, FilingStatus, TaxComputationResult, USATaxInput


class USATaxCalculator(BaseTaxCalculator):
    """Calculator for US federal and state income tax."""

    country = Country.USA
    input_model = USATaxInput

    def _calculate(self, inputs: USATaxInput) -> TaxComputationResult:
        state = self._resolve_region(inputs.region)
        federal_brackets = self.profile.federal[inputs.filing_status]
        state_brackets = self.profile.state[state]

        total_income = (
            inputs.gross_income
            + inputs.dividends
            + inputs.interest
            + inputs.short_term_capital_gains
        )
        deductions = max(
            self.standard_deduction(inputs),
            self.itemized_deduction(inputs, total_income)
        )
        taxable_income = max(0.0, total_income - deductions)

        federal_tax = compute_bracket_tax(taxable_income, federal_brackets)
        state_tax = compute_bracket_tax(taxable_income, state_brackets)

        # Long-term gains sit on top of ordinary taxable income
        capital_gains_tax = stacked_bracket_tax(
            taxable_income,
            max(0.0, inputs.long_term_capital_gains),
            self.profile.long_term_capital_gains[inputs.filing_status]
        )

        tax_before_credits = federal_tax + state_tax + capital_gains_tax
        credits = self._credits(inputs)
        total_tax = max(0.0, tax_before_credits - credits)

        return self._build_result(
            region=state,
            gross_income=total_income + inputs.long_term_capital_gains,
            total_tax=total_tax,
            federal_breakdown=bracket_breakdown(taxable_income, federal_brackets),
            regional_breakdown=bracket_breakdown(taxable_income, state_brackets),
            marginal_rate=(
                marginal_rate(taxable_income, federal_brackets)
                + marginal_rate(taxable_income, state_brackets)
            ),
            total_income=total_income,
            deductions_applied=deductions,
            taxable_income=taxable_income,
            federal_tax=federal_tax,
            regional_tax=state_tax,
            capital_gains_tax=capital_gains_tax,
            credits_applied=min(credits, tax_before_credits)
        )

    def standard_deduction(self, inputs: USATaxInput) -> float:
        """Standard deduction for the filing status, with the extra allowance at 65+."""
        status = inputs.filing_status
        deduction = self.profile.standard_deduction[status]
        extra = self.profile.additional_standard_deduction.get(status, 0.0)

        seniors = 1 if inputs.age >= self.profile.senior_age else 0
        if status == FilingStatus.MARRIED_JOINT and inputs.spouse_age is not None:
            if inputs.spouse_age >= self.profile.senior_age:
                seniors += 1

        return deduction + extra * seniors

    def itemized_deduction(self, inputs: USATaxInput, total_income: float) -> float:
        """Sum of itemized categories, each capped; medical only above the income floor."""
        total = 0.0
        for name, amount in inputs.deductions.items():
            if name not in self.profile.itemized_caps:
                continue
            if name == "medical":
                amount = amount - total_income * self.profile.medical_income_floor
            total += self._cap(amount, self.profile.itemized_caps[name])
        return total

    def _credits(self, inputs: USATaxInput) -> float:
        total = 0.0
        for name, amount in inputs.credits.items():
            if name not in self.profile.credit_caps:
                continue
            total += self._cap(amount, self.profile.credit_caps[name])
        return total
