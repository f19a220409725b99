"""Textual reference counting over a module's concatenated source."""
import re
from functools import lru_cache


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> re.Pattern:
    # ASCII so \W / \w agree with Terraform identifier characters
    return re.compile(pattern, re.ASCII)


def count_references(content: str, pattern: str) -> int:
    """Count non-overlapping matches of `pattern` anywhere in `content`.

    Declaration sites are not excluded: a local that references another
    local inside the same `locals` block counts as a use.

    Args:
        content: Full module text (all files, newline-joined)
        pattern: Regular expression built by the symbol extractor

    Returns:
        Number of matches
    """
    return sum(1 for _ in _compile(pattern).finditer(content))


class ReferenceCounter:
    """Counts references against one immutable snapshot of module text."""

    def __init__(self, content: str):
        self._content = content

    @property
    def content(self) -> str:
        return self._content

    def count(self, pattern: str) -> int:
        return count_references(self._content, pattern)
