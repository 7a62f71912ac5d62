"""Command-line tools for the CorpCulture business admin platform."""

__version__ = "0.1.0"
