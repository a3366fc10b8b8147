import io
import logging

import fitz  # PyMuPDF
import docx
from pypdf import PdfReader

logger = logging.getLogger(__name__)

PDF = "pdf"
DOCX = "docx"
TEXT = "text"

# below this many characters the fast PDF pass is assumed to have missed the text layer
MIN_PDF_TEXT_LENGTH = 20


def extract_text(data: bytes, content_format: str) -> str:
    """
    Extract plain text from a resume buffer.

    Never raises: any parsing failure is logged and an empty string returned.
    """
    if not data:
        return ""

    try:
        if content_format == PDF:
            return _extract_pdf(data)
        if content_format == DOCX:
            return _extract_docx(data)
        if content_format == TEXT:
            return data.decode("utf-8", errors="replace")
        logger.warning("Unsupported resume format '%s', skipping extraction", content_format)
    except Exception as e:
        logger.error("Error extracting resume text (%s): %s", content_format, e)
    return ""


def _extract_pdf(data: bytes) -> str:
    text = _extract_pdf_blocks(data)
    if len(text) >= MIN_PDF_TEXT_LENGTH:
        return text

    logger.info("PyMuPDF returned %d chars, retrying with pypdf", len(text))
    fallback = _extract_pdf_tolerant(data)
    return fallback or text


def _extract_pdf_blocks(data: bytes) -> str:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        logger.warning("PyMuPDF could not open resume: %s", e)
        return ""

    try:
        all_blocks = []
        for page in doc:
            all_blocks.extend(page.get_text("blocks"))
    except Exception as e:
        logger.warning("PyMuPDF failed while reading pages: %s", e)
        return ""
    finally:
        doc.close()

    # reading order: top to bottom, then left to right
    all_blocks.sort(key=lambda b: (b[1], b[0]))
    return "\n".join(block[4] for block in all_blocks).strip()


def _extract_pdf_tolerant(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data), strict=False)
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        logger.warning("pypdf fallback failed: %s", e)
        return ""
    return "\n".join(pages).strip()


def _extract_docx(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    full_text = []
    for para in document.paragraphs:
        full_text.append(para.text)
    return "\n".join(full_text).strip()
