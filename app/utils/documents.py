"""Résumé text extraction for PDF, DOCX and plain-text uploads."""
import io
import logging
import re
from zipfile import BadZipFile

import docx
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.core.errors import UnsupportedDocumentError
from app.core.models import ResumeReference

logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf"}
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCX_TYPES = {DOCX_MEDIA_TYPE}
TEXT_TYPES = {"text/plain", "text/markdown"}
SUPPORTED_TYPES = PDF_TYPES | DOCX_TYPES | TEXT_TYPES

_EXTENSION_TYPES = {
    ".pdf": "application/pdf",
    ".docx": DOCX_MEDIA_TYPE,
    ".txt": "text/plain",
    ".md": "text/markdown",
}


def guess_media_type(filename: str, declared: str | None = None) -> str:
    if declared and declared in SUPPORTED_TYPES:
        return declared
    lowered = filename.lower()
    for extension, media_type in _EXTENSION_TYPES.items():
        if lowered.endswith(extension):
            return media_type
    return declared or "application/octet-stream"


def extract_text(resume: ResumeReference) -> str:
    media_type = resume.media_type
    if media_type in TEXT_TYPES:
        text = _decode_text(resume.content)
    elif media_type in PDF_TYPES:
        text = _pdf_text(resume.content)
    elif media_type in DOCX_TYPES:
        text = _docx_text(resume.content)
    else:
        raise UnsupportedDocumentError(media_type)

    text = clean(text)
    if not text:
        raise UnsupportedDocumentError(media_type, "Document has no extractable text")
    return text


def clean(text: str) -> str:
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    return text.strip()


def _decode_text(data: bytes) -> str:
    for encoding in ("utf-8", "cp1252"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def _pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except PdfReadError as e:
        logger.warning(f"Failed to read PDF résumé: {e}")
        raise UnsupportedDocumentError("application/pdf", f"Unreadable PDF: {e}") from e


def _docx_text(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except (BadZipFile, PackageNotFoundError) as e:
        raise UnsupportedDocumentError(DOCX_MEDIA_TYPE, f"Unreadable DOCX: {e}") from e
    parts = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                if cell.text.strip():
                    parts.append(cell.text.strip())
    return "\n".join(parts)
