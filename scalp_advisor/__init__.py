"""Indicator, scoring and recommendation logic for a scalping advisor.

This package contains pure business logic with no I/O dependencies
(no exchange client, key-value store or network access). Callers fetch
candles, positions and sentiment elsewhere and hand fully materialised
inputs to the functions here.
"""

__version__ = "0.3.0"
