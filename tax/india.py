"""
Indian income tax: slab tax, 87A rebate, surcharge, cess and capital gains.
"""
from typing import List, Optional

from .base import BaseTaxCalculator
from .engine import bracket_breakdown, compute_bracket_tax, marginal_rate
from .models import (
    Country, IndiaTaxInput, RegimeComparison,
    TaxBracket, TaxComputationResult, TaxRegime
)


class IndiaTaxCalculator(BaseTaxCalculator):
    """Calculator for Indian income tax under the old and new regimes."""

    country = Country.INDIA
    input_model = IndiaTaxInput
    region_required = False

    def _calculate(self, inputs: IndiaTaxInput) -> TaxComputationResult:
        region = self._resolve_region(inputs.region)

        deductions = self._applicable_deductions(inputs)
        taxable_income = max(0.0, inputs.gross_income - deductions)
        brackets = self._brackets_for(inputs)

        slab_tax = compute_bracket_tax(taxable_income, brackets)

        # 87A rebate wipes out slab tax at or below the regime threshold
        rebate = 0.0
        if taxable_income <= self.profile.rebate_thresholds.get(inputs.regime, 0.0):
            rebate = slab_tax
        tax_after_rebate = slab_tax - rebate

        surcharge = tax_after_rebate * self._surcharge_rate(taxable_income, inputs.regime)
        cess = (tax_after_rebate + surcharge) * self.profile.cess_rate
        capital_gains_tax = self._capital_gains_tax(inputs)

        total_tax = tax_after_rebate + surcharge + cess + capital_gains_tax
        gross_income = (
            inputs.gross_income
            + inputs.short_term_capital_gains
            + inputs.long_term_capital_gains
        )

        return self._build_result(
            region=region,
            gross_income=gross_income,
            total_tax=total_tax,
            federal_breakdown=bracket_breakdown(taxable_income, brackets),
            marginal_rate=marginal_rate(taxable_income, brackets),
            total_income=gross_income,
            deductions_applied=deductions,
            taxable_income=taxable_income,
            federal_tax=slab_tax,
            rebate=rebate,
            surcharge=surcharge,
            cess=cess,
            capital_gains_tax=capital_gains_tax
        )

    def _applicable_deductions(self, inputs: IndiaTaxInput) -> float:
        """
        Total deduction for the chosen regime.

        The old regime allows every named deduction up to its own cap. The
        new regime ignores claims and grants its flat standard deduction.
        """
        if inputs.regime == TaxRegime.NEW:
            return self.profile.new_regime_standard_deduction

        total = 0.0
        for name, amount in inputs.deductions.items():
            if name not in self.profile.deduction_caps:
                continue
            total += self._cap(amount, self.profile.deduction_caps[name])
        return total

    def _brackets_for(self, inputs: IndiaTaxInput) -> List[TaxBracket]:
        if inputs.regime == TaxRegime.NEW:
            return self.profile.new_regime_brackets
        return self.profile.old_regime_brackets[inputs.age_group]

    def _surcharge_rate(self, taxable_income: float, regime: TaxRegime) -> float:
        rate = marginal_rate(taxable_income, self.profile.surcharge_tiers)
        if regime == TaxRegime.NEW:
            rate = min(rate, self.profile.new_regime_surcharge_cap)
        return rate

    def _capital_gains_tax(self, inputs: IndiaTaxInput) -> float:
        stcg = max(0.0, inputs.short_term_capital_gains)
        ltcg = max(0.0, inputs.long_term_capital_gains - self.profile.ltcg_exemption)
        return stcg * self.profile.stcg_rate + ltcg * self.profile.ltcg_rate

    def compare_regimes(self, inputs: IndiaTaxInput) -> Optional[RegimeComparison]:
        """
        Compute the same inputs under both regimes.

        Returns:
            RegimeComparison recommending the cheaper regime (new on a tie),
            or None if either calculation has no result
        """
        old = self.calculate(inputs.model_copy(update={"regime": TaxRegime.OLD}))
        new = self.calculate(inputs.model_copy(update={"regime": TaxRegime.NEW}))
        if old is None or new is None:
            return None

        recommended = TaxRegime.OLD if old.total_tax < new.total_tax else TaxRegime.NEW
        return RegimeComparison(
            old_regime=old,
            new_regime=new,
            recommended_regime=recommended,
            savings=self._round_to_cents(abs(old.total_tax - new.total_tax))
        )
