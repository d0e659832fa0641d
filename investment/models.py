"""
Investment models for SIP and lumpsum projections.
"""
from typing import List, Optional
from enum import Enum
import pandas as pd
from pydantic import BaseModel, Field


class InvestmentMode(str, Enum):
    """How money goes into the plan."""
    SIP = "sip"  # Fixed monthly contribution
    LUMPSUM = "lumpsum"  # One-time investment at month 0


class InvestmentScenario(BaseModel):
    """Contribution and withdrawal plan. Rates are percentages, periods are years."""
    mode: InvestmentMode = InvestmentMode.SIP
    monthly_investment: float = Field(0.0, ge=0, description="Monthly SIP contribution")
    lumpsum_amount: float = Field(0.0, ge=0, description="One-time investment")
    annual_return: float = Field(..., ge=0, description="Expected annual return in percent")
    investment_period: int = Field(0, ge=0, description="Years of SIP contributions")
    withdrawal_start_year: int = Field(0, ge=0, description="Years before withdrawals begin")
    monthly_withdrawal: float = Field(0.0, ge=0)
    withdrawal_period: int = Field(0, ge=0, description="Years of withdrawals")
    horizon_years: Optional[int] = Field(None, ge=0, description="Minimum projection length")
    limit_withdrawals_to_window: bool = Field(
        False, description="Stop withdrawals after withdrawal_period years"
    )

    @property
    def total_months(self) -> int:
        years = max(
            self.investment_period,
            self.withdrawal_start_year + self.withdrawal_period,
            self.horizon_years or 0
        )
        return years * 12


class InvestmentResult(BaseModel):
    """Totals and yearly balances of a projection, in whole currency units."""
    total_invested: int
    total_withdrawn: int
    total_returns: int
    final_balance: int
    total_value: int = Field(..., description="Final balance plus everything withdrawn")
    yearly_balances: List[int] = Field(
        default_factory=list, description="Balance at month 0 and after each 12th month"
    )

    @property
    def depleted(self) -> bool:
        """Whether withdrawals drove the balance below zero."""
        return self.final_balance < 0

    def to_dataframe(self) -> pd.DataFrame:
        """Yearly balances as a frame with ``year`` and ``balance`` columns."""
        return pd.DataFrame({
            "year": list(range(len(self.yearly_balances))),
            "balance": self.yearly_balances,
        })
