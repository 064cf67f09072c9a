"""Turn-based one-on-one creature battle engine."""
__version__ = "0.1.0"
