"""EthicSupply: supplier sustainability scoring and scenario analysis."""

__version__ = "1.0.0"
