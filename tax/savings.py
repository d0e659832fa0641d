"""
Tax-saving suggestions for Indian taxpayers under the old regime.
"""
from typing import List, Optional
from pydantic import BaseModel


class TaxSavingSuggestion(BaseModel):
    """A deduction the taxpayer may be able to claim."""
    name: str
    description: str
    limit: Optional[float] = None  # None means no limit
    min_income: float = 0.0  # Suggested only when income exceeds this

    @property
    def limit_label(self) -> str:
        return "No limit" if self.limit is None else f"{self.limit:,.0f}"


INDIA_SUGGESTIONS = [
    TaxSavingSuggestion(
        name="Section 80C investments",
        description="Invest in PPF, ELSS, or pay LIC premiums",
        limit=150000
    ),
    TaxSavingSuggestion(
        name="National Pension System (NPS)",
        description="Additional deduction under Section 80CCD(1B)",
        limit=50000
    ),
    TaxSavingSuggestion(
        name="Health Insurance Premium",
        description="Deduction under Section 80D",
        limit=25000
    ),
    TaxSavingSuggestion(
        name="Home Loan Interest",
        description="Deduction under Section 24",
        limit=200000,
        min_income=500000
    ),
    TaxSavingSuggestion(
        name="Education Loan Interest",
        description="Deduction under Section 80E",
        limit=None,
        min_income=400000
    ),
]


def india_tax_saving_suggestions(income: float) -> List[TaxSavingSuggestion]:
    """Suggestions that apply at the given annual income."""
    return [s for s in INDIA_SUGGESTIONS if s.min_income == 0 or income > s.min_income]
