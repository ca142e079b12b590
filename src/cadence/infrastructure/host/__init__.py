"""Editor host implementations."""

from .memory import MemoryHost, MenuSnapshot

__all__ = ["MemoryHost", "MenuSnapshot"]
