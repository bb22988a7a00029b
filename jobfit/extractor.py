"""Extract plain text from an uploaded résumé.

PDF goes through pypdf's layout-mode extractor, DOCX is parsed with the
stdlib (zipfile + ElementTree) and TXT is decoded as-is. Dispatch is by
``DocumentFormat``; every format has exactly one extractor in
``_EXTRACTORS``.
"""
from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Callable
from xml.etree import ElementTree

from pypdf import PdfReader

from jobfit.errors import CorruptDocument, DocumentNotFound, DocumentUnreadable, EmptyDocument
from jobfit.log import get_logger
from jobfit.models import DocumentFormat, ExtractedText, ResumeDocument
from jobfit.storage import DocumentStore

log = get_logger(__name__)

_W = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"


def _extract_pdf(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages: list[str] = []
        for page in reader.pages:
            pages.append(page.extract_text(extraction_mode="layout") or "")
    except Exception as exc:
        raise CorruptDocument(
            "Could not extract text from PDF. Please ensure the file is a valid PDF."
        ) from exc
    log.debug("PDF extraction read %d page(s)", len(pages))
    return "\n".join(pages)


def _extract_docx(data: bytes) -> str:
    """Body paragraphs → runs → text, one line per paragraph.

    Only direct paragraph children of the body are read, so tables,
    headers and footers are skipped.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            with zf.open("word/document.xml") as f:
                tree = ElementTree.parse(f)
    except (zipfile.BadZipFile, KeyError, ElementTree.ParseError) as exc:
        raise CorruptDocument("Could not extract text from DOCX file.") from exc

    body = tree.getroot().find(f"{_W}body")
    if body is None:
        return ""

    lines: list[str] = []
    for para in body.findall(f"{_W}p"):
        parts = [
            node.text
            for run in para.findall(f"{_W}r")
            for node in run.findall(f"{_W}t")
            if node.text
        ]
        lines.append("".join(parts))
    return "\n".join(lines)


def _extract_txt(data: bytes) -> str:
    return data.decode("utf-8-sig", errors="ignore")


_EXTRACTORS: dict[DocumentFormat, Callable[[bytes], str]] = {
    DocumentFormat.PDF: _extract_pdf,
    DocumentFormat.DOCX: _extract_docx,
    DocumentFormat.TXT: _extract_txt,
}

if set(_EXTRACTORS) != set(DocumentFormat):
    raise RuntimeError("every DocumentFormat needs an extractor")


def _normalize(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def extract_bytes(data: bytes, fmt: DocumentFormat, document_id: int | None = None) -> ExtractedText:
    text = _normalize(_EXTRACTORS[fmt](data))
    if not text:
        raise EmptyDocument("Could not extract text from resume")
    return ExtractedText(document_id=document_id, text=text)


def extract_key(key: str, store: DocumentStore, document_id: int | None = None) -> ExtractedText:
    """Infer the format from the storage key's extension, then read and extract."""
    fmt = DocumentFormat.from_filename(key)
    return extract_bytes(store.read(key), fmt, document_id)


def extract(document: ResumeDocument, store: DocumentStore) -> ExtractedText:
    log.info("Extracting text from resume %s (%s)", document.id, document.format.name)
    result = extract_bytes(store.read(document.storage_key), document.format, document.id)
    log.info("Extracted %d characters from resume %s", len(result.text), document.id)
    return result


def extract_path(path: Path) -> ExtractedText:
    """Read a local file directly, for the command line."""
    fmt = DocumentFormat.from_filename(path.name)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise DocumentNotFound(str(path)) from exc
    except OSError as exc:
        raise DocumentUnreadable(str(path), exc.strerror or type(exc).__name__) from exc
    return extract_bytes(data, fmt)
