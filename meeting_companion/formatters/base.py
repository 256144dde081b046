"""Abstract base formatter and output container.

WHY: Every output format consumes the same Transcript IR but produces
different file content. This base class enforces a consistent interface
so the HTTP service can work with any formatter generically.

HOW: BaseFormatter is an ABC with three requirements: ``name`` and ``suffix`` properties
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; most formatters return one item
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from meeting_companion.core.ir import Transcript


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-transcript.txt"`` → ``"standup-transcript.txt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"text/plain"``.
    """

    suffix: str
    content: str | bytes
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """Suffix of the (first) file this formatter produces."""

    @abstractmethod
    def format(self, transcript: Transcript) -> list[FormatterOutput]:
        """Convert the Transcript IR into one or more output files."""
