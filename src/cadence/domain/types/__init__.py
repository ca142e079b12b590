"""Shared domain types."""

from cadence.domain.types.items import CompleteItem, InsertedChar, SourceStat, SourceType
from cadence.domain.types.option import CompleteOption

__all__ = [
    "CompleteItem",
    "CompleteOption",
    "InsertedChar",
    "SourceStat",
    "SourceType",
]
