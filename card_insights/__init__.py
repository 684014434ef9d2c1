"""Credit card spend insights over a single transactions dataset"""

__version__ = "0.1.0"
