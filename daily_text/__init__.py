"""Convert daily text EPUB archives into dated JSON records."""

__version__ = "3.0.0"
