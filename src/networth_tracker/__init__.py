"""Personal net worth tracker with multi-currency valuation."""

__version__ = "0.3.0"
