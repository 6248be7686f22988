"""PALGA protocol data translator.

Translates tab-separated PALGA exports into standardized terminology
(codes and/or descriptions) using versioned ART-DECOR codebooks.
"""

__version__ = "0.3.0"
