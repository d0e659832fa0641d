"""
Entry points that pick the right jurisdiction calculator and tax tables.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from .base import BaseTaxCalculator
from .canada import CanadaTaxCalculator
from .india import IndiaTaxCalculator
from .loader import TaxTableLoader, default_loader
from .models import Country, TaxComputationInput, TaxComputationResult
from .usa import USATaxCalculator

logger = logging.getLogger(__name__)

CALCULATORS = {
    Country.INDIA: IndiaTaxCalculator,
    Country.CANADA: CanadaTaxCalculator,
    Country.USA: USATaxCalculator,
}

COUNTRY_ALIASES = {
    "india": Country.INDIA,
    "in": Country.INDIA,
    "canada": Country.CANADA,
    "ca": Country.CANADA,
    "usa": Country.USA,
    "us": Country.USA,
    "united states": Country.USA,
    "united states of america": Country.USA,
}


def resolve_country(country: Union[Country, str, None]) -> Optional[Country]:
    """Map a country enum, code or display name to a Country."""
    if isinstance(country, Country):
        return country
    if not country:
        return None
    return COUNTRY_ALIASES.get(country.strip().lower())


def get_tax_calculator(
    country: Union[Country, str],
    year: Optional[int] = None,
    loader: Optional[TaxTableLoader] = None
) -> Optional[BaseTaxCalculator]:
    """
    Build the calculator for a country from its tax tables.

    Args:
        country: Country enum, code or display name
        year: Tax year, defaults to the configured tax year
        loader: Table loader, defaults to the shared bundled-data loader

    Returns:
        Calculator, or None for an unsupported country or missing tables
    """
    resolved = resolve_country(country)
    if resolved is None:
        logger.warning(f"Unsupported country: {country!r}")
        return None

    profile = (loader or default_loader).load_country(resolved, year)
    if profile is None:
        return None

    return CALCULATORS[resolved](profile)


def calculate_tax(
    country: Union[Country, str],
    inputs: Union[TaxComputationInput, Dict[str, Any]],
    year: Optional[int] = None,
    loader: Optional[TaxTableLoader] = None
) -> Optional[TaxComputationResult]:
    """
    Calculate income tax for a country.

    Returns None instead of raising when the country, tables or region
    cannot serve the request.
    """
    calculator = get_tax_calculator(country, year, loader)
    if calculator is None:
        return None
    return calculator.calculate(inputs)


def supported_regions(
    country: Union[Country, str],
    year: Optional[int] = None,
    loader: Optional[TaxTableLoader] = None
) -> List[str]:
    """Provinces or states with tax data, empty if the country is unsupported."""
    calculator = get_tax_calculator(country, year, loader)
    if calculator is None:
        return []
    return list(calculator.profile.regions)
