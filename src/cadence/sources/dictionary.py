"""Static word list source."""

from pathlib import Path
from typing import Iterable, Optional

from cadence.domain.types import CompleteItem, CompleteOption
from cadence.logger import get_logger

from .base import BaseSource

logger = get_logger("sources.dictionary")


class DictionarySource(BaseSource):
    """Offers words from a fixed list, optionally loaded from a file (one word per line)."""

    name = "dictionary"
    priority = 4

    def __init__(self, words: Iterable[str] = (), path: Optional[str | Path] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._words = list(dict.fromkeys(word for word in words if word))
        if path is not None:
            self.load(path)

    @property
    def words(self) -> list[str]:
        return list(self._words)

    def load(self, path: str | Path) -> None:
        """
        Add the words of ``path`` to the list.

        Raises:
            FileNotFoundError: If ``path`` doesn't exist
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            loaded = [line.strip() for line in f if line.strip() and not line.startswith("#")]
        self._words = list(dict.fromkeys(self._words + loaded))
        self.filepath = str(path)
        logger.info(f"Loaded {len(loaded)} word(s) from {path}")

    async def do_complete(self, option: CompleteOption) -> list[CompleteItem]:
        return [CompleteItem(word=word, menu="[D]") for word in self._words]

    def dispose(self) -> None:
        self._words = []
