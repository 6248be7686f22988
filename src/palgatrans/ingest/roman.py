"""Roman-numeral header reconciliation.

Some instruments repeat a concept several times in a PALGA export and
number the copies with an uppercase Roman numeral appended to the column
name (``colonbioptI``, ``colonbioptII``, ...). The codebook only knows
the base concept (``colonbiopt``), so the numeral has to be stripped for
lookups while being kept for the output header.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from loguru import logger

from palgatrans.models.dataset import Dataset

_ROMAN_RE = re.compile(r"^M{0,3}(CM|CD|D?C{0,3})(XC|XL|L?X{0,3})(IX|IV|V?I{0,3})$")


def is_roman_numeral(text: str) -> bool:
    """True for a non-empty, well-formed uppercase Roman numeral."""
    return bool(text) and _ROMAN_RE.match(text) is not None


def roman_suffixes(name: str) -> list[str]:
    """All trailing substrings of ``name`` that are Roman numerals, shortest first.

    The remaining base name is never empty. Pure function of ``name``.
    """
    suffixes: list[str] = []
    for length in range(1, len(name)):
        suffix = name[-length:]
        if suffix[0] not in "IVXLCDM":
            break
        if is_roman_numeral(suffix):
            suffixes.append(suffix)
    return suffixes


def strip_roman(name: str, contains: Callable[[str], bool]) -> tuple[str, str]:
    """Split ``name`` into (lower-cased base name, Roman suffix).

    The first suffix whose base name satisfies ``contains`` wins. When none
    does, the whole name is the base and the suffix is empty.
    """
    for numeral in roman_suffixes(name):
        base = name[: -len(numeral)]
        if contains(base):
            return base.lower(), numeral
    return name.lower(), ""


def reconcile_headers(
    dataset: Dataset,
    is_housekeeping: Callable[[str], bool],
    contains: Callable[[str, str], bool],
) -> Dataset:
    """Fill in ``reconciled_headers`` and ``roman_suffixes`` of a dataset.

    Only columns with data that are not housekeeping columns are searched
    for a Roman suffix. Membership is tested against the codebook of the
    column's highest observed version.

    Args:
        dataset: Dataset produced by :func:`palgatrans.ingest.tracker.ingest`.
        is_housekeeping: Whether a header name belongs to the housekeeping codebook.
        contains: ``contains(base_name, version_label)``, whether the protocol
            codebook of that version knows the base name.

    Returns:
        The same dataset, updated in place.
    """
    reconciled: list[str] = []
    suffixes: list[str] = []
    for index, name in enumerate(dataset.original_headers):
        if dataset.has_data(index) and not is_housekeeping(name):
            version = dataset.max_version_label(index)
            base, numeral = strip_roman(name, lambda candidate: contains(candidate, version))
            if numeral:
                logger.debug("Column {} is instance {} of {}", name, numeral, base)
        else:
            base, numeral = name.lower(), ""
        reconciled.append(base)
        suffixes.append(numeral)

    dataset.reconciled_headers = reconciled
    dataset.roman_suffixes = suffixes
    dataset.check_shape()
    return dataset
