"""
Uploaded files → Document(name, text).

Plain-text formats are decoded and passed through verbatim. PDF and Word files
are not parsed here: they get a labelled placeholder block so the model knows
the content was not extracted. Swap in a real extractor via `extractors=`.
"""

import asyncio
import logging
from typing import Mapping, Optional, Protocol, Sequence

from claim_evaluator.errors import IngestionError
from claim_evaluator.schemas import Document

logger = logging.getLogger(__name__)

PDF_EXTENSIONS = (".pdf",)
WORD_EXTENSIONS = (".doc", ".docx")
PDF_CONTENT_TYPES = {"application/pdf"}
WORD_CONTENT_TYPES = {
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class UploadedFile(Protocol):
    """Anything shaped like fastapi.UploadFile."""

    filename: Optional[str]
    content_type: Optional[str]

    async def read(self) -> bytes: ...


class TextExtractor(Protocol):
    def extract(self, name: str, content_type: Optional[str], data: bytes) -> str: ...


class PlainTextExtractor:
    """Decode with the declared charset, UTF-8 when none is declared."""

    default_encoding = "utf-8"

    def extract(self, name: str, content_type: Optional[str], data: bytes) -> str:
        encoding = _charset(content_type) or self.default_encoding
        try:
            return data.decode(encoding)
        except LookupError as exc:
            raise IngestionError(f"Unknown encoding '{encoding}' declared for {name}") from exc
        except UnicodeDecodeError as exc:
            raise IngestionError(f"Failed to decode {name} as {encoding}") from exc


class PlaceholderExtractor:
    """Stands in for structural PDF/Word extraction."""

    def __init__(self, label: str) -> None:
        self.label = label

    def extract(self, name: str, content_type: Optional[str], data: bytes) -> str:
        return (
            f"[{self.label} Content from {name}]\n\n"
            f"Text was not extracted from this {self.label} file. "
            f"Its contents are unavailable for analysis."
        )


DEFAULT_EXTRACTORS: dict[str, TextExtractor] = {
    "text": PlainTextExtractor(),
    "pdf": PlaceholderExtractor("PDF"),
    "word": PlaceholderExtractor("Word"),
}


def format_family(filename: str, content_type: Optional[str]) -> str:
    """Classify a file as 'pdf', 'word' or 'text' by extension, then MIME type."""
    name = filename.lower()
    mime = (content_type or "").split(";")[0].strip().lower()
    if name.endswith(PDF_EXTENSIONS) or mime in PDF_CONTENT_TYPES:
        return "pdf"
    if name.endswith(WORD_EXTENSIONS) or mime in WORD_CONTENT_TYPES:
        return "word"
    return "text"


async def read_document(
    file: UploadedFile, extractors: Optional[Mapping[str, TextExtractor]] = None
) -> Document:
    """Read one upload and extract its text."""
    extractors = {**DEFAULT_EXTRACTORS, **(extractors or {})}
    name = file.filename or ""

    try:
        data = await file.read()
    except Exception as exc:
        raise IngestionError(f"File reading failed for {name or '<unnamed>'}: {exc}") from exc

    family = format_family(name, file.content_type)
    extractor = extractors.get(family) or extractors["text"]
    try:
        text = extractor.extract(name, file.content_type, data)
    except IngestionError:
        raise
    except Exception as exc:
        raise IngestionError(f"Failed to extract text from {name}: {exc}") from exc
    return Document(name=name, text=text)


async def ingest(
    files: Sequence[UploadedFile],
    extractors: Optional[Mapping[str, TextExtractor]] = None,
) -> list[Document]:
    """
    Read every file concurrently and return documents in input order.

    If any read fails, the whole ingestion fails with IngestionError and
    the other results are discarded.
    """
    if not files:
        return []

    tasks = [asyncio.ensure_future(read_document(f, extractors)) for f in files]
    try:
        documents = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    logger.info("Ingested %d document(s)", len(documents))
    return list(documents)


def _charset(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None
