"""Pydantic data models shared across palgatrans components.

All models are re-exported here for convenient imports:
    from palgatrans.models import Concept, Dataset, OutputFormat, RunParameters
"""

from palgatrans.models.codebook import (
    CatalogEntry,
    Concept,
    ConceptDefinition,
    OutputFileType,
    OutputFormat,
    TermCode,
    ValueDefinition,
)
from palgatrans.models.config import RunParameters
from palgatrans.models.dataset import NO_DATA, Dataset

__all__ = [
    # codebook
    "OutputFormat",
    "OutputFileType",
    "TermCode",
    "Concept",
    "ValueDefinition",
    "ConceptDefinition",
    "CatalogEntry",
    # dataset
    "NO_DATA",
    "Dataset",
    # config
    "RunParameters",
]
