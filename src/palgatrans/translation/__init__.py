"""Header and row translation of ingested exports.

Usage:
    from palgatrans.translation import TranslationRun
    result = TranslationRun(params, source).execute()
"""

from palgatrans.translation.driver import TranslationDriver, UnmappedValuesError
from palgatrans.translation.runner import RunResult, TranslationRun

__all__ = [
    "TranslationDriver",
    "UnmappedValuesError",
    "TranslationRun",
    "RunResult",
]
