"""Domain entity for loaded documents — normalized text before chunking."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Document:
    """Normalized text produced by a source loader.

    Documents are transient: a loader produces them and the chunker
    consumes them right away. ``attributes`` holds loader-provided details
    such as the page number of a PDF page or the title of a web page.
    """

    text: str
    attributes: dict[str, Any] = field(default_factory=dict)
