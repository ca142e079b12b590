"""Completion item and source description types."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

__all__ = [
    "CompleteItem",
    "InsertedChar",
    "SourceStat",
    "SourceType",
]


class SourceType(Enum):
    """Where a completion source runs."""

    NATIVE = "native"
    REMOTE = "remote"
    SERVICE = "service"


@dataclass(slots=True)
class CompleteItem:
    """A single completion candidate.

    ``user_data`` carries the marker the completion cache stamps on items it
    hands to the host (``cid`` and ``source``); an accepted item without it
    did not come from this system.
    """

    word: str
    abbr: str | None = None
    menu: str | None = None
    info: str | None = None
    kind: str | None = None
    user_data: dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str | None:
        return self.user_data.get("source")

    @property
    def cid(self) -> int | None:
        return self.user_data.get("cid")


@dataclass(frozen=True, slots=True)
class InsertedChar:
    """Most recently typed character and when it was typed."""

    character: str
    timestamp: float = field(default_factory=time.monotonic)


@dataclass(frozen=True, slots=True)
class SourceStat:
    """Administrative view of a registered source."""

    name: str
    filepath: str
    type: str
    disabled: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "filepath": self.filepath,
            "type": self.type,
            "disabled": self.disabled,
        }
