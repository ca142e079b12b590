"""Built-in completion sources."""

from .around import AroundSource
from .base import BaseSource
from .dictionary import DictionarySource

__all__ = [
    "AroundSource",
    "BaseSource",
    "DictionarySource",
]
