"""Media catalog metadata lookup services."""

__version__ = "0.1.0"
