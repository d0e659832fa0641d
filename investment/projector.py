"""
Month-by-month projection engine for SIP and lumpsum investments.
"""
from decimal import Decimal, ROUND_HALF_UP
import logging
from .models import InvestmentMode, InvestmentResult, InvestmentScenario

logger = logging.getLogger(__name__)


class InvestmentProjector:
    """Simulates contributions, monthly compounding and withdrawals."""

    def __init__(self, scenario: InvestmentScenario):
        self.scenario = scenario

    def project(self) -> InvestmentResult:
        """
        Run the projection.

        Each month, in order:
        1. Add the SIP contribution while inside the investment period
        2. Compound the balance at the monthly rate
        3. Take the withdrawal once past the withdrawal start month

        The balance may go negative; that is reported, not rejected.

        Returns:
            InvestmentResult with rounded totals and the yearly balance series
        """
        scenario = self.scenario
        monthly_rate = scenario.annual_return / 12 / 100
        total_months = scenario.total_months
        contribution_months = scenario.investment_period * 12
        withdrawal_start_month = scenario.withdrawal_start_year * 12
        withdrawal_end_month = withdrawal_start_month + scenario.withdrawal_period * 12
        is_sip = scenario.mode == InvestmentMode.SIP

        balance = 0.0 if is_sip else scenario.lumpsum_amount
        total_invested = balance
        total_withdrawn = 0.0
        yearly_balances = [self._round_to_units(balance)]

        for month in range(1, total_months + 1):
            if is_sip and month <= contribution_months:
                balance += scenario.monthly_investment
                total_invested += scenario.monthly_investment

            balance *= 1 + monthly_rate

            if month > withdrawal_start_month and self._in_withdrawal_window(month, withdrawal_end_month):
                balance -= scenario.monthly_withdrawal
                total_withdrawn += scenario.monthly_withdrawal

            if month % 12 == 0:
                yearly_balances.append(self._round_to_units(balance))

        final_balance = self._round_to_units(balance)
        invested = self._round_to_units(total_invested)
        withdrawn = self._round_to_units(total_withdrawn)

        if final_balance < 0:
            logger.debug(f"Projection depleted after {total_months} months: {final_balance}")

        # Returns come from the rounded figures so the identity holds exactly
        return InvestmentResult(
            total_invested=invested,
            total_withdrawn=withdrawn,
            total_returns=final_balance + withdrawn - invested,
            final_balance=final_balance,
            total_value=final_balance + withdrawn,
            yearly_balances=yearly_balances
        )

    def _in_withdrawal_window(self, month: int, withdrawal_end_month: int) -> bool:
        if not self.scenario.limit_withdrawals_to_window:
            return True
        return month <= withdrawal_end_month

    def _round_to_units(self, amount: float) -> int:
        """Round amount to whole currency units, halves away from zero."""
        return int(Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def project_investment(scenario: InvestmentScenario) -> InvestmentResult:
    """Project a scenario; identical scenarios give identical results."""
    return InvestmentProjector(scenario).project()
