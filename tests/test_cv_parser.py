from hiretrack.services import cv_parser
from hiretrack.services.cv_parser import DOCX, PDF, TEXT, extract_text
from hiretrack.services.resume_storage import infer_content_format

from tests.conftest import RESUME_TEXT, make_docx, make_pdf


def test_extract_pdf_text():
    text = extract_text(make_pdf(RESUME_TEXT), PDF)
    assert "Jane Doe" in text
    assert "BSc Computer Science." in text


def test_extract_docx_paragraphs():
    text = extract_text(make_docx(["Jane Doe", "Python, Flask", ""]), DOCX)
    assert text == "Jane Doe\nPython, Flask"


def test_extract_plain_text_replaces_invalid_bytes():
    assert extract_text("Résumé".encode("utf-8"), TEXT) == "Résumé"
    assert extract_text(b"ok \xff", TEXT) == "ok �"


def test_garbage_never_raises():
    assert extract_text(b"%PDF-1.4 not really a pdf", PDF) == ""
    assert extract_text(b"PK not a zip", DOCX) == ""
    assert extract_text(b"", PDF) == ""
    assert extract_text(b"anything", "rtf") == ""


def test_pdf_falls_back_when_first_pass_finds_little(monkeypatch):
    monkeypatch.setattr(cv_parser, "_extract_pdf_blocks", lambda data: "")
    text = extract_text(make_pdf(RESUME_TEXT), PDF)
    assert "Backend Engineer" in text


def test_pdf_keeps_short_text_when_fallback_is_empty(monkeypatch):
    monkeypatch.setattr(cv_parser, "_extract_pdf_blocks", lambda data: "Jane")
    monkeypatch.setattr(cv_parser, "_extract_pdf_tolerant", lambda data: "")
    assert extract_text(b"%PDF", PDF) == "Jane"


def test_infer_content_format():
    assert infer_content_format("cv.pdf", "application/vnd.openxmlformats-officedocument.wordprocessingml.document") == DOCX
    assert infer_content_format("cv.docx", "text/plain") == TEXT
    assert infer_content_format("https://x.test/files/CV.DOCX") == DOCX
    assert infer_content_format("/uploads/resumes/abc_cv.txt") == TEXT
    assert infer_content_format("https://x.test/resume") == PDF
