"""Application layer - completion session orchestration and its collaborators."""

from cadence.application.completes import Completes
from cadence.application.completion import Completion
from cadence.application.increment import Increment
from cadence.application.sources import Sources
from cadence.application.workspace import Document, Workspace

__all__ = [
    "Completes",
    "Completion",
    "Document",
    "Increment",
    "Sources",
    "Workspace",
]
