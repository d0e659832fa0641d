"""
Tax tables loader for importing/exporting per-country tax data from JSON/CSV files.
"""
import json
import csv
import os
import re
from typing import Dict, List, Optional, Tuple, Union
import logging
from pydantic import ValidationError
from . import settings
from .models import (
    Country, IndiaTaxProfile, CanadaTaxProfile, USATaxProfile,
    TaxBracket, Province
)

logger = logging.getLogger(__name__)

TaxProfile = Union[IndiaTaxProfile, CanadaTaxProfile, USATaxProfile]

PROFILE_MODELS = {
    Country.INDIA: IndiaTaxProfile,
    Country.CANADA: CanadaTaxProfile,
    Country.USA: USATaxProfile,
}


class TaxTableLoader:
    """Loader for tax table data, cached per country and year."""

    def __init__(self, data_dir: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            data_dir: Directory containing tax table data files
        """
        self.data_dir = os.path.abspath(data_dir or settings.TAX_DATA_DIR)
        self._cache: Dict[Tuple[Country, int], TaxProfile] = {}

    def load_from_json(self, filepath: str, country: Country) -> TaxProfile:
        """
        Load one country's tax tables from a JSON file.

        Args:
            filepath: Path to JSON file
            country: Country the file describes

        Returns:
            Validated tax profile

        Raises:
            ValidationError: if the file content is malformed
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return PROFILE_MODELS[country].model_validate(data)

    def load_country(self, country: Country, year: Optional[int] = None) -> Optional[TaxProfile]:
        """
        Load tax tables for a country and year from the data directory.

        Args:
            country: Country to load
            year: Tax year, defaults to the configured tax year

        Returns:
            Tax profile if found and valid, None otherwise
        """
        year = year or settings.DEFAULT_TAX_YEAR
        key = (country, year)
        if key in self._cache:
            return self._cache[key]

        json_path = os.path.join(self.data_dir, f"{country.value}_{year}.json")
        if not os.path.exists(json_path):
            logger.warning(f"No tax table file found for {country.value} {year}")
            return None

        try:
            profile = self.load_from_json(json_path, country)
        except (ValidationError, ValueError, KeyError, OSError) as e:
            logger.error(f"Malformed tax table {json_path}: {e}")
            return None

        if profile.year != year:
            logger.error(f"Tax table {json_path} declares year {profile.year}, expected {year}")
            return None

        logger.info(f"Loaded {country.value} tax tables for {year}")
        self._cache[key] = profile
        return profile

    def available_years(self, country: Country) -> List[int]:
        """List the years with a tax table file for the country."""
        if not os.path.isdir(self.data_dir):
            return []
        pattern = re.compile(rf"^{country.value}_(\d{{4}})\.json$")
        years = []
        for name in os.listdir(self.data_dir):
            match = pattern.match(name)
            if match:
                years.append(int(match.group(1)))
        return sorted(years)

    def export_to_json(self, profile: TaxProfile, filepath: str) -> None:
        """
        Export a tax profile to a JSON file.

        Args:
            profile: Tax profile to export
            filepath: Path to save JSON file
        """
        data = profile.model_dump(mode="json")

        # Ensure directory exists
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def import_brackets_from_csv(self, filepath: str) -> List[TaxBracket]:
        """
        Import a bracket schedule from a CSV file.

        CSV format expected:
        min,max,rate

        An empty ``max`` marks the top bracket.

        Args:
            filepath: Path to CSV file

        Returns:
            Brackets sorted by minimum
        """
        brackets = []

        with open(filepath, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if 'min' in row and 'rate' in row:
                    upper = (row.get('max') or '').strip()
                    brackets.append(TaxBracket(
                        min=float(row['min']),
                        max=float(upper) if upper else None,
                        rate=float(row['rate'])
                    ))

        # Sort brackets by minimum
        brackets.sort(key=lambda b: b.min)
        return brackets

    def validate_profile(self, profile: TaxProfile) -> List[str]:
        """
        Check a profile for completeness beyond what the models enforce.

        Args:
            profile: Tax profile to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if isinstance(profile, CanadaTaxProfile):
            # Check all provinces have data
            for province in Province:
                if province.value not in profile.provincial:
                    errors.append(f"Missing tax data for province {province.value}")

            cpp_data = profile.cpp_ei
            if cpp_data.cpp_ympe <= cpp_data.cpp_basic_exemption:
                errors.append(f"CPP YMPE {cpp_data.cpp_ympe} must exceed the basic exemption")

        elif isinstance(profile, USATaxProfile):
            for status, deduction in profile.standard_deduction.items():
                if deduction < 0:
                    errors.append(f"Negative standard deduction for {status.value}")
            if not profile.state:
                errors.append("No state tax data")

        elif isinstance(profile, IndiaTaxProfile):
            for regime, threshold in profile.rebate_thresholds.items():
                if threshold < 0:
                    errors.append(f"Negative rebate threshold for {regime.value} regime")

        # Check rate bounds on every schedule
        for name, brackets in _schedules(profile):
            if any(b.rate > 0.6 for b in brackets):
                errors.append(f"Implausible marginal rate above 60% in {name}")

        return errors


def _schedules(profile: TaxProfile) -> List[Tuple[str, List[TaxBracket]]]:
    """Every named bracket schedule in a profile."""
    if isinstance(profile, IndiaTaxProfile):
        schedules = [(f"old regime {group.value}", b) for group, b in profile.old_regime_brackets.items()]
        schedules.append(("new regime", profile.new_regime_brackets))
        return schedules
    if isinstance(profile, CanadaTaxProfile):
        return [("federal", profile.federal)] + list(profile.provincial.items())
    schedules = [(f"federal {status.value}", b) for status, b in profile.federal.items()]
    return schedules + list(profile.state.items())


default_loader = TaxTableLoader()
