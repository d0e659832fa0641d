"""
Shared plumbing for the per-country tax calculators.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Type, Union

from .exceptions import TaxDataError, UnsupportedRegionError
from .models import Country, TaxComputationInput, TaxComputationResult

logger = logging.getLogger(__name__)


class BaseTaxCalculator:
    """
    Base class for jurisdiction calculators.

    Subclasses implement ``_calculate`` and raise ``TaxDataError`` for
    configuration problems; ``calculate`` turns those into ``None`` so the
    caller can ask for a valid region instead of crashing.
    """

    country: Country
    input_model: Type[TaxComputationInput] = TaxComputationInput
    region_required = True

    def __init__(self, profile):
        self.profile = profile
        self.year = profile.year

    def calculate(
        self, inputs: Union[TaxComputationInput, Dict[str, Any]]
    ) -> Optional[TaxComputationResult]:
        """
        Calculate annual tax for the given inputs.

        Args:
            inputs: Input record, or a plain dict of its fields

        Returns:
            TaxComputationResult, or None when the tax data cannot serve the request
        """
        if isinstance(inputs, dict):
            inputs = self.input_model(**inputs)

        try:
            return self._calculate(inputs)
        except TaxDataError as e:
            logger.warning(f"No {self.country.value} tax result for {self.year}: {e}")
            return None

    def _calculate(self, inputs: TaxComputationInput) -> TaxComputationResult:
        raise NotImplementedError

    def _resolve_region(self, region: Optional[str]) -> Optional[str]:
        """Check the region against the profile's supported regions."""
        if not region:
            if self.region_required:
                raise UnsupportedRegionError(f"A region is required for {self.country.value}")
            return None

        code = region.strip().upper()
        supported = {r.upper(): r for r in self.profile.regions}
        if code not in supported:
            raise UnsupportedRegionError(f"No tax data for region {region} in year {self.year}")
        return supported[code]

    @staticmethod
    def _cap(amount: float, cap: Optional[float]) -> float:
        """Clip a claimed amount to [0, cap]; a cap of None means no limit."""
        amount = max(0.0, amount)
        if cap is None:
            return amount
        return min(amount, cap)

    def _round_to_cents(self, amount: float) -> float:
        """Round amount to nearest cent, halves away from zero."""
        return float(Decimal(str(amount)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))

    def _round_breakdown(self, breakdown: List[Dict[str, Optional[float]]]) -> List[Dict[str, Optional[float]]]:
        return [
            {key: (self._round_to_cents(value) if value is not None else None) for key, value in row.items()}
            for row in breakdown
        ]

    def _build_result(
        self,
        region: Optional[str],
        gross_income: float,
        total_tax: float,
        federal_breakdown: Optional[List[Dict[str, Optional[float]]]] = None,
        regional_breakdown: Optional[List[Dict[str, Optional[float]]]] = None,
        marginal_rate: float = 0.0,
        **amounts: float
    ) -> TaxComputationResult:
        """Round every amount once and assemble the result record."""
        net_income = gross_income - total_tax
        effective_tax_rate = total_tax / gross_income if gross_income > 0 else 0

        return TaxComputationResult(
            country=self.country,
            region=region,
            gross_income=self._round_to_cents(gross_income),
            total_tax=self._round_to_cents(total_tax),
            net_income=self._round_to_cents(net_income),
            effective_tax_rate=round(effective_tax_rate, 6),
            marginal_rate=marginal_rate,
            federal_breakdown=self._round_breakdown(federal_breakdown or []),
            regional_breakdown=self._round_breakdown(regional_breakdown or []),
            **{name: self._round_to_cents(value) for name, value in amounts.items()}
        )
