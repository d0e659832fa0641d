"""
Tax data models for India, Canada and USA income tax calculations.
"""
from typing import List, Dict, Optional, Any
from pydantic import BaseModel, Field, field_validator
from enum import Enum


class Country(str, Enum):
    """Supported tax jurisdictions."""
    INDIA = "india"
    CANADA = "canada"
    USA = "usa"


class Province(str, Enum):
    """Canadian provinces and territories."""
    AB = "AB"  # Alberta
    BC = "BC"  # British Columbia
    MB = "MB"  # Manitoba
    NB = "NB"  # New Brunswick
    NL = "NL"  # Newfoundland and Labrador
    NS = "NS"  # Nova Scotia
    NT = "NT"  # Northwest Territories
    NU = "NU"  # Nunavut
    ON = "ON"  # Ontario
    PE = "PE"  # Prince Edward Island
    QC = "QC"  # Quebec
    SK = "SK"  # Saskatchewan
    YT = "YT"  # Yukon


class TaxRegime(str, Enum):
    """Indian income tax regimes."""
    OLD = "old"
    NEW = "new"


class AgeGroup(str, Enum):
    """Age tiers that shift the Indian basic exemption."""
    BELOW_60 = "below_60"
    SENIOR = "senior"  # 60 to 79
    SUPER_SENIOR = "super_senior"  # 80 and above


class FilingStatus(str, Enum):
    """US federal filing statuses."""
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"


class TaxBracket(BaseModel):
    """A single tax bracket. ``max`` of None means the bracket is unbounded."""
    min: float = Field(..., description="Lower bound of the bracket")
    max: Optional[float] = Field(None, description="Upper bound, None for the top bracket")
    rate: float = Field(..., ge=0, le=1, description="Marginal tax rate (0.0 to 1.0)")

    @field_validator('min')
    @classmethod
    def min_must_be_positive(cls, v):
        if v < 0:
            raise ValueError('Bracket minimum must be non-negative')
        return v

    @field_validator('max')
    @classmethod
    def max_above_min(cls, v, info):
        if v is not None and 'min' in info.data and v <= info.data['min']:
            raise ValueError('Bracket maximum must be greater than its minimum')
        return v

    @property
    def span(self) -> float:
        """Width of the bracket, infinite for the top bracket."""
        if self.max is None:
            return float('inf')
        return self.max - self.min


def check_schedule(brackets: List[TaxBracket]) -> List[TaxBracket]:
    """Raise ValueError unless brackets start at 0, are contiguous and end unbounded."""
    if not brackets:
        raise ValueError('Bracket schedule must not be empty')
    if brackets[0].min != 0:
        raise ValueError('Bracket schedule must start at 0')
    if brackets[-1].max is not None:
        raise ValueError('The last bracket must be unbounded')
    for current, following in zip(brackets, brackets[1:]):
        if current.max is None:
            raise ValueError('Only the last bracket may be unbounded')
        if current.max != following.min:
            raise ValueError(
                f'Brackets must be contiguous: {current.max} != {following.min}'
            )
    return brackets


class IndiaTaxProfile(BaseModel):
    """Indian income tax rules for one financial year."""
    year: int
    country: Country = Country.INDIA
    regions: List[str] = Field(default_factory=list, description="States and union territories")
    old_regime_brackets: Dict[AgeGroup, List[TaxBracket]]
    new_regime_brackets: List[TaxBracket]
    deduction_caps: Dict[str, Optional[float]] = Field(
        ..., description="Old regime deduction name -> cap, None for no cap"
    )
    new_regime_standard_deduction: float = Field(..., ge=0)
    rebate_thresholds: Dict[TaxRegime, float] = Field(
        ..., description="Slab tax is zero at or below this taxable income"
    )
    surcharge_tiers: List[TaxBracket] = Field(
        ..., description="Surcharge rate keyed by taxable income"
    )
    new_regime_surcharge_cap: float = Field(1.0, ge=0, le=1)
    cess_rate: float = Field(..., ge=0, le=1)
    stcg_rate: float = Field(..., ge=0, le=1)
    ltcg_rate: float = Field(..., ge=0, le=1)
    ltcg_exemption: float = Field(0.0, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Source, citation, notes")

    @field_validator('old_regime_brackets')
    @classmethod
    def old_regime_covers_age_groups(cls, v):
        missing = [group.value for group in AgeGroup if group not in v]
        if missing:
            raise ValueError(f'Missing old regime brackets for: {missing}')
        for brackets in v.values():
            check_schedule(brackets)
        return v

    @field_validator('new_regime_brackets', 'surcharge_tiers')
    @classmethod
    def schedule_must_be_contiguous(cls, v):
        return check_schedule(v)


class CPPEIData(BaseModel):
    """CPP and EI contribution data for a specific year."""
    cpp_rate: float = Field(..., ge=0, le=1, description="CPP contribution rate")
    cpp_ympe: float = Field(..., ge=0, description="Yearly Maximum Pensionable Earnings")
    cpp_basic_exemption: float = Field(..., ge=0, description="Basic exemption amount")
    ei_rate: float = Field(..., ge=0, le=1, description="EI premium rate")
    ei_mie: float = Field(..., ge=0, description="Maximum Insurable Earnings")


class CanadaTaxProfile(BaseModel):
    """Canadian federal and provincial tax rules for one year."""
    year: int
    country: Country = Country.CANADA
    federal: List[TaxBracket]
    provincial: Dict[str, List[TaxBracket]]  # province code -> brackets
    cpp_ei: CPPEIData
    capital_gains_inclusion_rate: float = Field(0.5, ge=0, le=1)
    eligible_dividend_gross_up: float = Field(1.38, ge=1)
    rrsp_dollar_limit: float = Field(..., ge=0)
    rrsp_earned_income_rate: float = Field(0.18, ge=0, le=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('federal')
    @classmethod
    def federal_must_be_contiguous(cls, v):
        return check_schedule(v)

    @field_validator('provincial')
    @classmethod
    def provinces_must_be_valid(cls, v):
        valid = [p.value for p in Province]
        for code, brackets in v.items():
            if code not in valid:
                raise ValueError(f'Province must be one of: {valid}')
            check_schedule(brackets)
        return v

    @property
    def regions(self) -> List[str]:
        return sorted(self.provincial)


class USATaxProfile(BaseModel):
    """US federal and state tax rules for one year."""
    year: int
    country: Country = Country.USA
    federal: Dict[FilingStatus, List[TaxBracket]]
    state: Dict[str, List[TaxBracket]]  # state code -> brackets
    standard_deduction: Dict[FilingStatus, float]
    additional_standard_deduction: Dict[FilingStatus, float] = Field(
        default_factory=dict, description="Extra allowance per taxpayer aged 65 or older"
    )
    senior_age: int = 65
    long_term_capital_gains: Dict[FilingStatus, List[TaxBracket]]
    itemized_caps: Dict[str, Optional[float]] = Field(
        default_factory=dict, description="Itemized category -> cap, None for no cap"
    )
    medical_income_floor: float = Field(0.075, ge=0, le=1)
    credit_caps: Dict[str, Optional[float]] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('federal', 'long_term_capital_gains')
    @classmethod
    def covers_filing_statuses(cls, v):
        missing = [status.value for status in FilingStatus if status not in v]
        if missing:
            raise ValueError(f'Missing schedules for filing statuses: {missing}')
        for brackets in v.values():
            check_schedule(brackets)
        return v

    @field_validator('standard_deduction')
    @classmethod
    def standard_deduction_covers_filing_statuses(cls, v):
        missing = [status.value for status in FilingStatus if status not in v]
        if missing:
            raise ValueError(f'Missing standard deduction for filing statuses: {missing}')
        return v

    @field_validator('state')
    @classmethod
    def state_schedules_must_be_contiguous(cls, v):
        for brackets in v.values():
            check_schedule(brackets)
        return v

    @property
    def regions(self) -> List[str]:
        return sorted(self.state)


class TaxComputationInput(BaseModel):
    """Scalar inputs shared by every jurisdiction."""
    gross_income: float = Field(0.0, description="Salary, employment income or wages")
    region: Optional[str] = Field(None, description="Province or state code")
    deductions: Dict[str, float] = Field(default_factory=dict)
    credits: Dict[str, float] = Field(default_factory=dict)


class IndiaTaxInput(TaxComputationInput):
    regime: TaxRegime = TaxRegime.NEW
    age_group: AgeGroup = AgeGroup.BELOW_60
    short_term_capital_gains: float = 0.0
    long_term_capital_gains: float = 0.0


class CanadaTaxInput(TaxComputationInput):
    self_employment_income: float = 0.0
    other_income: float = 0.0
    capital_gains: float = 0.0
    eligible_dividends: float = 0.0
    rrsp_contribution: float = 0.0
    use_itemized_deductions: bool = True


class USATaxInput(TaxComputationInput):
    filing_status: FilingStatus = FilingStatus.SINGLE
    age: int = Field(40, ge=0)
    spouse_age: Optional[int] = Field(None, ge=0)
    dividends: float = 0.0
    interest: float = 0.0
    short_term_capital_gains: float = 0.0
    long_term_capital_gains: float = 0.0


class TaxComputationResult(BaseModel):
    """Result of a tax calculation."""
    country: Country
    region: Optional[str] = None
    gross_income: float
    total_income: float
    deductions_applied: float = 0.0
    taxable_income: float
    federal_tax: float
    regional_tax: float = 0.0
    cpp_contribution: float = 0.0
    ei_contribution: float = 0.0
    rebate: float = 0.0
    surcharge: float = 0.0
    cess: float = 0.0
    capital_gains_tax: float = 0.0
    credits_applied: float = 0.0
    total_tax: float
    net_income: float
    effective_tax_rate: float
    # Combined rate of the last unit: federal plus provincial or state
    marginal_rate: float = 0.0

    # Detailed bracket breakdown
    federal_breakdown: List[Dict[str, Optional[float]]] = Field(default_factory=list)
    regional_breakdown: List[Dict[str, Optional[float]]] = Field(default_factory=list)


class RegimeComparison(BaseModel):
    """Indian old vs new regime outcome for the same inputs."""
    old_regime: TaxComputationResult
    new_regime: TaxComputationResult
    recommended_regime: TaxRegime
    savings: float
