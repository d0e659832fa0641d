"""
Progressive bracket tax engine shared by every jurisdiction.

Amounts are plain floats and nothing here rounds; callers round once when
they build a result.
"""
import math
from typing import Dict, Iterable, List, Optional, Sequence

from .exceptions import MalformedBracketsError
from .models import TaxBracket, check_schedule


def brackets_from_rows(rows: Iterable[Sequence[Optional[float]]]) -> List[TaxBracket]:
    """
    Build brackets from ``(min, max, rate)`` rows.

    A ``max`` of None or infinity marks the unbounded top bracket.
    """
    brackets = []
    for low, high, rate in rows:
        if high is not None and math.isinf(high):
            high = None
        brackets.append(TaxBracket(min=low, max=high, rate=rate))
    return brackets


def validate_brackets(brackets: List[TaxBracket]) -> List[TaxBracket]:
    """Raise MalformedBracketsError unless the schedule is well formed."""
    if not isinstance(brackets, (list, tuple)):
        raise MalformedBracketsError(f"Invalid tax brackets: {brackets!r}")
    try:
        return check_schedule(list(brackets))
    except (ValueError, AttributeError) as e:
        raise MalformedBracketsError(str(e)) from e


def compute_bracket_tax(taxable_amount: float, brackets: List[TaxBracket]) -> float:
    """
    Tax ``taxable_amount`` across ascending brackets.

    Each bracket taxes the lesser of the remaining amount and its span.
    Zero or negative amounts owe nothing.
    """
    validate_brackets(brackets)

    tax = 0.0
    remaining = taxable_amount
    for bracket in brackets:
        if remaining <= 0:
            break
        taxed = min(remaining, bracket.span)
        tax += taxed * bracket.rate
        remaining -= taxed

    return tax


def stacked_bracket_tax(base_amount: float, amount: float, brackets: List[TaxBracket]) -> float:
    """Tax on ``amount`` when it sits on top of ``base_amount`` in the schedule."""
    if amount <= 0:
        return 0.0
    base = max(0.0, base_amount)
    return compute_bracket_tax(base + amount, brackets) - compute_bracket_tax(base, brackets)


def marginal_rate(taxable_amount: float, brackets: List[TaxBracket]) -> float:
    """Rate of the bracket holding the last taxed unit."""
    validate_brackets(brackets)
    if taxable_amount <= 0:
        return 0.0
    for bracket in brackets:
        if bracket.max is None or taxable_amount <= bracket.max:
            return bracket.rate
    return brackets[-1].rate


def bracket_breakdown(taxable_amount: float, brackets: List[TaxBracket]) -> List[Dict[str, Optional[float]]]:
    """Get detailed breakdown of tax by bracket."""
    validate_brackets(brackets)
    breakdown = []
    remaining = taxable_amount

    for bracket in brackets:
        if remaining <= 0:
            break
        income_in_bracket = min(remaining, bracket.span)
        breakdown.append({
            "bracket_min": bracket.min,
            "bracket_max": bracket.max,
            "income_in_bracket": income_in_bracket,
            "marginal_rate": bracket.rate,
            "tax_in_bracket": income_in_bracket * bracket.rate
        })
        remaining -= income_in_bracket

    return breakdown
