"""metadir — in-memory application metadata directory."""

__version__ = "0.1.0"
