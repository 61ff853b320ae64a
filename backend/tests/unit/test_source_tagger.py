"""Unit tests for SourceTagger — header text and tenant/source metadata."""

import pytest

from sourcerag.application.services.source_tagger import SourceTagger, source_header
from sourcerag.domain.entities import Document, SourceMetadata, SourceType


def test_header_is_prepended_to_every_chunk():
    source = SourceMetadata.for_pdf("report.pdf")
    docs = [Document(text="First part."), Document(text="Second part.")]

    chunks = SourceTagger().tag(docs, "user-1", source)

    assert [c.content for c in chunks] == [
        '[SOURCE: PDF file: "report.pdf"]\n\nFirst part.',
        '[SOURCE: PDF file: "report.pdf"]\n\nSecond part.',
    ]


def test_metadata_carries_tenant_and_source_fields():
    source = SourceMetadata.for_website("https://example.com", "Example", 3)
    doc = Document(text="Body", attributes={"title": "loader title", "chunk_index": 0})

    (chunk,) = SourceTagger().tag([doc], "user-1", source)

    assert chunk.tenant_id == "user-1"
    assert chunk.source_type == "website"
    assert chunk.metadata["source_id"] == source.source_id
    assert chunk.metadata["source_description"] == 'Website: "Example" (https://example.com)'
    assert chunk.metadata["links_count"] == 3
    assert chunk.metadata["chunk_index"] == 0
    # Source fields win over loader attributes with the same key.
    assert chunk.metadata["title"] == "Example"


def test_inputs_are_not_mutated():
    source = SourceMetadata.for_youtube("https://youtu.be/abcdefghijk", "Talk", "Speaker")
    doc = Document(text="Transcript", attributes={"video_id": "abcdefghijk"})

    SourceTagger().tag([doc], "user-1", source)

    assert doc.text == "Transcript"
    assert doc.attributes == {"video_id": "abcdefghijk"}


def test_empty_tenant_is_rejected():
    with pytest.raises(ValueError):
        SourceTagger().tag([Document(text="x")], "", SourceMetadata.for_pdf("a.pdf"))


def test_source_header_format():
    source = SourceMetadata.for_youtube("u", "Intro to RAG", "Jane")
    assert source_header(source) == '[SOURCE: YouTube video: "Intro to RAG" by Jane]\n\n'
    assert source.source_type is SourceType.YOUTUBE
