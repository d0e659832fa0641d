"""
Exceptions raised for problems with tax configuration data.
"""


class TaxDataError(ValueError):
    """Base class for missing or malformed tax configuration."""


class MissingTaxTableError(TaxDataError):
    """No tax table is available for the requested country and year."""


class UnsupportedRegionError(TaxDataError):
    """The requested province or state has no tax data."""


class MalformedBracketsError(TaxDataError):
    """A bracket schedule is empty, unsorted, overlapping or gapped."""
