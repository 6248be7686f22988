"""Codebook dictionaries, caching and version resolution.

Re-exports for convenient imports:
    from palgatrans.codebook import Codebook, ProtocolCodebookRegistry, HousekeepingCodebook
"""

from palgatrans.codebook.cache import CodebookCache
from palgatrans.codebook.dictionary import (
    Codebook,
    TranslationStatus,
    UnmappedValueError,
    ValueTranslation,
)
from palgatrans.codebook.housekeeping import HousekeepingCodebook
from palgatrans.codebook.registry import CodebookInfo, ProtocolCodebookRegistry

__all__ = [
    "Codebook",
    "CodebookCache",
    "CodebookInfo",
    "HousekeepingCodebook",
    "ProtocolCodebookRegistry",
    "TranslationStatus",
    "UnmappedValueError",
    "ValueTranslation",
]
