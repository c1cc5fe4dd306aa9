import math
import re

from model.AllocationState import AllocationState


# Longest leading float literal, e.g. "12.5" in "12.5%"
_LEADING_NUMBER = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def percent_to_dollars(state: AllocationState, percent: float) -> float:
    """Convert a percent of gross salary to annual dollars."""
    return (percent / 100) * state.gross_annual_salary


def dollars_to_percent(state: AllocationState, dollars: float) -> float:
    """Convert annual dollars to a percent of gross salary.

    Returns 0 when there is no salary to divide by.
    """
    if state.gross_annual_salary <= 0:
        return 0.0
    return (dollars / state.gross_annual_salary) * 100


def parse_number(value) -> float:
    """Parse user input into a float, falling back to 0.

    Thousands separators and a leading dollar sign are stripped and the
    leading numeric part is used, so "50,000", "$50000" and "12.5%" all
    parse. Empty, unparseable and non-finite input returns 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        result = float(value)
        return result if math.isfinite(result) else 0.0

    text = str(value).strip().replace(',', '')
    if text.startswith('$'):
        text = text[1:]
    elif text.startswith('-$'):
        text = '-' + text[2:]

    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0.0
    try:
        result = float(match.group(0))
    except ValueError:
        return 0.0
    return result if math.isfinite(result) else 0.0
