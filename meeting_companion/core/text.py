"""Whitespace and punctuation-spacing cleanup for joined word text.

WHY: Backends emit punctuation either glued to a word ("world.") or as
its own token ("world" + "."). Joining tokens with spaces then leaves
"world ." and "Hello ,  world" in the output. Segments are cleaned
before they are emitted so every consumer sees the same readable text.

HOW: Four regex passes applied in order, then a final strip.

RULES:
- Runs of whitespace collapse to a single space
- Leading/trailing whitespace is removed
- No space before ".", ",", "!", "?"
- Exactly one space after those marks when followed by a non-space
- clean_text(clean_text(x)) == clean_text(x)
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?])")
_PUNCT_WITHOUT_SPACE_RE = re.compile(r"([.,!?])(?=\S)")


def clean_text(text: str | None) -> str:
    """Normalize whitespace and punctuation spacing.

    >>> clean_text("Hello ,  world .  Next")
    'Hello, world. Next'
    """
    if not text:
        return ""
    text = _WHITESPACE_RE.sub(" ", text).strip()
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    text = _PUNCT_WITHOUT_SPACE_RE.sub(r"\1 ", text)
    return text.strip()
