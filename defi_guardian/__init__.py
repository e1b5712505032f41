"""DeFi Guardian - wallet risk aggregation."""

__version__ = "0.1.0"
