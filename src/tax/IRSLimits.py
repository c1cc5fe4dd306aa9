import json
import os
from typing import Optional


# Path to the bundled IRS limits reference file
IRS_LIMITS_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'irs-limits.json'))


class IRSLimits:
    """Holds the IRS annual contribution caps for a single tax year.

    Constructed with statutory dollar values. Use `load_irs_limits` to build an
    instance from `reference/irs-limits.json`.
    """

    def __init__(self, tax_year: int, combined_401k: float, hsa_individual: float,
                 hsa_family: float, roth_ira: float):
        """Initialize with statutory caps.

        Args:
            tax_year: The tax year these caps apply to.
            combined_401k: Annual cap shared by traditional and Roth 401(k).
            hsa_individual: HSA cap for self-only coverage.
            hsa_family: HSA cap for family coverage.
            roth_ira: Annual Roth IRA cap.
        """
        self.tax_year = tax_year
        self.combined_401k = combined_401k
        self.hsa_individual = hsa_individual
        self.hsa_family = hsa_family
        self.roth_ira = roth_ira

    def hsa_limit(self, coverage_type: str) -> float:
        """Return the HSA cap for the coverage type (family or individual)."""
        return self.hsa_family if coverage_type == 'family' else self.hsa_individual

    def to_dict(self) -> dict:
        return {
            'year': self.tax_year,
            'combined401k': self.combined_401k,
            'hsaIndividual': self.hsa_individual,
            'hsaFamily': self.hsa_family,
            'rothIRA': self.roth_ira
        }

    def __repr__(self) -> str:
        return (f"IRSLimits(tax_year={self.tax_year}, combined_401k={self.combined_401k}, "
                f"hsa_individual={self.hsa_individual}, hsa_family={self.hsa_family}, "
                f"roth_ira={self.roth_ira})")


def load_irs_limits(tax_year: Optional[int] = None, path: Optional[str] = None) -> IRSLimits:
    """Load IRS limits for a tax year from the reference file.

    Args:
        tax_year: Year to load. Defaults to the file's `defaultTaxYear`, or the
            latest year listed when that is absent.
        path: Reference file path. Defaults to `reference/irs-limits.json`.

    Returns:
        IRSLimits for the requested year.

    Raises:
        ValueError: If the file has no usable `taxYears` entries or the
            requested year is not listed.
    """
    ref_path = path or IRS_LIMITS_PATH
    with open(ref_path, 'r') as f:
        data = json.load(f)

    tax_years = data.get('taxYears', []) if isinstance(data, dict) else []
    if not tax_years:
        raise ValueError("irs-limits.json must contain a 'taxYears' array with at least one entry")

    by_year = {}
    for entry in tax_years:
        try:
            year = int(entry['year'])
            by_year[year] = IRSLimits(
                tax_year=year,
                combined_401k=float(entry['combined401k']),
                hsa_individual=float(entry['hsaIndividual']),
                hsa_family=float(entry['hsaFamily']),
                roth_ira=float(entry['rothIRA'])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid tax year entry in irs-limits.json: {entry!r}") from e

    if tax_year is None:
        tax_year = data.get('defaultTaxYear', max(by_year))

    if tax_year not in by_year:
        available = ', '.join(str(y) for y in sorted(by_year))
        raise ValueError(f"No IRS limits available for year {tax_year} (available: {available})")
    return by_year[tax_year]
