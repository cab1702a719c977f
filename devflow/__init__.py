"""devflow: requirements-to-code delivery pipeline."""

__version__ = "0.1.0"
