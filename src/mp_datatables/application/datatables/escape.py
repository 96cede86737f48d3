"""Regex escaping for user-supplied search text."""
from __future__ import annotations

import re

REGEX_METACHARACTERS: frozenset[str] = frozenset("/.*+?|()[]{}\\$^-")

_METACHARACTER_RE = re.compile("([" + "".join(re.escape(c) for c in sorted(REGEX_METACHARACTERS)) + "])")


def escape_regex(value: str) -> str:
    """Prefix every character of :data:`REGEX_METACHARACTERS` with a backslash.

    Unlike :func:`re.escape`, whitespace, quotes and other punctuation pass
    through unchanged, so quoted phrases survive for smart-search tokenizing.
    """
    return _METACHARACTER_RE.sub(r"\\\1", value)


__all__ = ["REGEX_METACHARACTERS", "escape_regex"]
