"""Receipt parsing, categorization and eco scoring."""

__version__ = "0.1.0"
