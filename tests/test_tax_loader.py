"""
Tests for loading, validating and exporting tax tables.
"""
import json
from tax.calculator import calculate_tax
from tax.loader import TaxTableLoader
from tax.models import CanadaTaxProfile, Country, IndiaTaxProfile, USATaxProfile


def test_load_bundled_tables():
    """Every bundled table loads and passes validation."""
    loader = TaxTableLoader()

    india = loader.load_country(Country.INDIA, 2024)
    canada = loader.load_country(Country.CANADA, 2024)
    usa = loader.load_country(Country.USA, 2023)

    assert isinstance(india, IndiaTaxProfile)
    assert isinstance(canada, CanadaTaxProfile)
    assert isinstance(usa, USATaxProfile)
    assert canada.cpp_ei.cpp_rate == 0.0595
    assert "ON" in canada.provincial
    assert "CA" in usa.state

    for profile in (india, canada, usa):
        errors = loader.validate_profile(profile)
        assert len(errors) == 0, f"Validation errors: {errors}"


def test_profiles_are_cached():
    loader = TaxTableLoader()
    first = loader.load_country(Country.CANADA, 2024)
    assert loader.load_country(Country.CANADA, 2024) is first


def test_available_years():
    loader = TaxTableLoader()
    assert loader.available_years(Country.USA) == [2023, 2024]
    assert loader.available_years(Country.INDIA) == [2024]


def test_missing_year_returns_none(tmp_path):
    loader = TaxTableLoader(str(tmp_path))
    assert loader.load_country(Country.INDIA, 2024) is None
    assert loader.available_years(Country.INDIA) == []


def test_malformed_table_returns_none(tmp_path):
    """Unsorted brackets or missing fields are reported as no table."""
    (tmp_path / "india_2024.json").write_text(json.dumps({"year": 2024}))

    source = TaxTableLoader().load_country(Country.CANADA, 2024)
    data = source.model_dump(mode="json")
    data["provincial"]["ON"] = list(reversed(data["provincial"]["ON"]))
    (tmp_path / "canada_2024.json").write_text(json.dumps(data))

    loader = TaxTableLoader(str(tmp_path))
    assert loader.load_country(Country.INDIA, 2024) is None
    assert loader.load_country(Country.CANADA, 2024) is None


def test_year_mismatch_returns_none(tmp_path):
    source = TaxTableLoader().load_country(Country.USA, 2023)
    TaxTableLoader().export_to_json(source, str(tmp_path / "usa_2025.json"))

    assert TaxTableLoader(str(tmp_path)).load_country(Country.USA, 2025) is None


def test_export_and_reload(tmp_path):
    loader = TaxTableLoader()
    profile = loader.load_country(Country.CANADA, 2024)

    target = tmp_path / "export" / "canada_2024.json"
    loader.export_to_json(profile, str(target))

    reloaded = TaxTableLoader(str(tmp_path / "export")).load_country(Country.CANADA, 2024)
    assert reloaded == profile


def test_import_brackets_from_csv(tmp_path):
    csv_path = tmp_path / "brackets.csv"
    csv_path.write_text(
        "min,max,rate\n"
        "50000,,0.25\n"
        "0,50000,0.15\n"
    )

    brackets = TaxTableLoader().import_brackets_from_csv(str(csv_path))

    assert [b.min for b in brackets] == [0, 50000]
    assert brackets[0].max == 50000
    assert brackets[1].max is None
    assert brackets[1].rate == 0.25


def test_validate_profile_flags_missing_provinces():
    source = TaxTableLoader().load_country(Country.CANADA, 2024)
    trimmed = source.model_copy(update={"provincial": {"ON": source.provincial["ON"]}})

    errors = TaxTableLoader().validate_profile(trimmed)
    assert "Missing tax data for province QC" in errors


def test_non_object_table_returns_none(tmp_path):
    """A table file holding a JSON list gives no result instead of raising."""
    (tmp_path / "india_2024.json").write_text("[]")
    loader = TaxTableLoader(str(tmp_path))

    assert loader.load_country(Country.INDIA, 2024) is None
    assert calculate_tax("India", {"gross_income": 600000}, year=2024, loader=loader) is None


def test_unreadable_table_returns_none(tmp_path):
    """A directory where the table file should be is reported as no table."""
    (tmp_path / "canada_2024.json").mkdir()
    assert TaxTableLoader(str(tmp_path)).load_country(Country.CANADA, 2024) is None


def test_missing_standard_deduction_status_returns_none(tmp_path):
    """Every filing status needs a standard deduction for the table to load."""
    source = TaxTableLoader().load_country(Country.USA, 2024)
    data = source.model_dump(mode="json")
    del data["standard_deduction"]["head_of_household"]
    (tmp_path / "usa_2024.json").write_text(json.dumps(data))

    loader = TaxTableLoader(str(tmp_path))
    assert loader.load_country(Country.USA, 2024) is None
    assert calculate_tax(
        "USA",
        {"gross_income": 80000, "region": "TX", "filing_status": "head_of_household"},
        year=2024,
        loader=loader
    ) is None


def test_capped_top_bracket_returns_none(tmp_path):
    """A table whose last bracket has an upper bound would leave income untaxed."""
    source = TaxTableLoader().load_country(Country.INDIA, 2024)
    data = source.model_dump(mode="json")
    data["new_regime_brackets"][-1]["max"] = 5000000
    (tmp_path / "india_2024.json").write_text(json.dumps(data))

    loader = TaxTableLoader(str(tmp_path))
    assert loader.load_country(Country.INDIA, 2024) is None
    assert calculate_tax("India", {"gross_income": 10000000}, year=2024, loader=loader) is None
