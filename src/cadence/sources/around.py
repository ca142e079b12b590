"""Words from the buffer being edited."""

import re

from cadence.application.workspace import Workspace
from cadence.domain.types import CompleteItem, CompleteOption

from .base import BaseSource

_WORD_RE = re.compile(r"\w{2,}")


class AroundSource(BaseSource):
    """Offers the words of the current buffer, nearest lines first."""

    name = "around"
    priority = 9

    def __init__(self, workspace: Workspace, **kwargs) -> None:
        super().__init__(**kwargs)
        self._workspace = workspace

    async def do_complete(self, option: CompleteOption) -> list[CompleteItem]:
        document = self._workspace.get_document(option.bufnr)
        if document is None:
            return []
        lines = document.lines
        cursor = option.linenr - 1
        # walk outwards from the cursor line
        order = sorted(range(len(lines)), key=lambda index: abs(index - cursor))
        words: dict[str, None] = {}
        for index in order:
            for word in _WORD_RE.findall(lines[index]):
                if word != option.input:
                    words.setdefault(word, None)
        return [CompleteItem(word=word, menu="[A]") for word in words]
