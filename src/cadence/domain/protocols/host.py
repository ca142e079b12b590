"""Editor host protocol.

The host binding is the only component that talks to the editor. Every
method is a round-trip to the editor process and therefore a suspension
point for the orchestrator.
"""

from typing import Protocol, Sequence

from cadence.domain.types import CompleteItem, CompleteOption

__all__ = ["EditorHost"]


class EditorHost(Protocol):
    """Protocol for editor bindings.

    Example implementations:
    - MemoryHost: in-process buffer used by the CLI replay and tests
    - An RPC binding for a running editor (out of tree)
    """

    async def get_cursor(self) -> tuple[int, int]:
        """Return ``(linenr, colnr)`` of the cursor, both 1-based."""
        ...

    async def get_line(self) -> str:
        """Return the text of the cursor line."""
        ...

    async def get_search(self, col: int) -> str | None:
        """Return the text between anchor column ``col`` and the cursor.

        Returns:
            The typed text, or None when the cursor sits before ``col``
        """
        ...

    async def get_input(self) -> str:
        """Return the keyword characters immediately before the cursor."""
        ...

    async def get_complete_option(self) -> CompleteOption | None:
        """Assemble a fresh CompleteOption for the current cursor position."""
        ...

    async def set_context(self, col: int, items: Sequence[CompleteItem]) -> None:
        """Push the result set and its anchor column to the host's display buffer."""
        ...

    async def do_complete(self) -> None:
        """Ask the host to render the pushed result set now."""
        ...

    async def hide(self) -> None:
        """Hide any visible completion menu."""
        ...

    async def get_filetype(self) -> str:
        """Return the filetype of the current buffer."""
        ...

    async def echo_error(self, message: str) -> None:
        """Show a transient, user-visible error message."""
        ...
