"""transval - strict YAML gate for translation files."""

__version__ = "0.1.0"
