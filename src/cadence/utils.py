"""
Utility functions for Cadence.
"""

import os
import re
import time

_WORD_RE = re.compile(r"\w")


def get_project_root() -> str:
    """
    Get the project root directory (parent of src/cadence).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def is_word(character: str) -> bool:
    """
    Check whether ``character`` is a keyword character.

    Letters, digits and underscore (including non-ASCII letters) count as word
    characters, matching what editors treat as part of an identifier.

    Args:
        character: A single character (an empty string is never a word)

    Returns:
        True if the character is a word character
    """
    return bool(character) and _WORD_RE.fullmatch(character) is not None


def now() -> float:
    """Monotonic clock in seconds, used for keystroke timing windows."""
    return time.monotonic()
