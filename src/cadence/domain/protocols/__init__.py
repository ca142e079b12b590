"""Domain protocols - interfaces for all implementations.

This module defines protocols (structural types) describing the collaborators
the completion orchestrator consumes. Using protocols keeps the orchestrator
independent of concrete sources, caches and editor bindings, and makes it
easy to substitute stubs in tests.
"""

from cadence.domain.protocols.cache import CompletionCache
from cadence.domain.protocols.host import EditorHost
from cadence.domain.protocols.registry import SourceRegistry
from cadence.domain.protocols.source import Source

__all__ = [
    "CompletionCache",
    "EditorHost",
    "Source",
    "SourceRegistry",
]
