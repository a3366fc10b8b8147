import logging
import os
import uuid

import requests
from flask import current_app
from werkzeug.utils import secure_filename

from hiretrack.services.cv_parser import DOCX, PDF, TEXT

logger = logging.getLogger(__name__)

# legacy .doc (application/msword) is refused: python-docx cannot read it
ALLOWED_MIMETYPES = {
    "application/pdf": PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DOCX,
    "text/plain": TEXT,
}


class StorageError(Exception):
    pass


def _upload_folder():
    folder = current_app.config["UPLOAD_FOLDER"]
    if not os.path.isabs(folder):
        folder = os.path.join(current_app.root_path, os.pardir, folder)
    folder = os.path.normpath(folder)
    os.makedirs(folder, exist_ok=True)
    return folder


def is_allowed_mimetype(mimetype):
    return mimetype in ALLOWED_MIMETYPES


def infer_content_format(reference, mimetype=None):
    """Map a mimetype or a file name / URL to a cv_parser format."""
    if mimetype in ALLOWED_MIMETYPES:
        return ALLOWED_MIMETYPES[mimetype]
    lowered = (reference or "").lower()
    if ".docx" in lowered:
        return DOCX
    if ".txt" in lowered:
        return TEXT
    return PDF


def save_resume(data: bytes, filename: str) -> str:
    """Store an uploaded resume under a unique name and return its public reference."""
    safe_name = secure_filename(filename or "") or "resume"
    unique_name = f"{uuid.uuid4().hex}_{safe_name}"
    path = os.path.join(_upload_folder(), unique_name)
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise StorageError(f"Failed to store resume: {e}") from e

    base_url = current_app.config["RESUME_BASE_URL"].rstrip("/")
    logger.info("Stored resume %s (%d bytes)", unique_name, len(data))
    return f"{base_url}/{unique_name}"


def stored_resume_path(name: str):
    """Absolute path of a stored resume, or None if it does not exist."""
    safe_name = secure_filename(name)
    if not safe_name:
        return None
    path = os.path.join(_upload_folder(), safe_name)
    return path if os.path.isfile(path) else None


def load_resume(reference: str) -> bytes:
    """Return the bytes behind a resume reference (stored locally or a remote URL)."""
    if not reference:
        raise StorageError("Resume reference is empty")

    base_url = current_app.config["RESUME_BASE_URL"].rstrip("/") + "/"
    if reference.startswith(base_url):
        path = stored_resume_path(reference[len(base_url):])
        if not path:
            raise StorageError(f"Stored resume not found: {reference}")
        with open(path, "rb") as f:
            return f.read()

    if reference.startswith(("http://", "https://")):
        try:
            response = requests.get(reference, timeout=current_app.config["RESUME_DOWNLOAD_TIMEOUT"])
            response.raise_for_status()
        except requests.RequestException as e:
            raise StorageError(f"Failed to download resume: {e}") from e
        return response.content

    raise StorageError(f"Unsupported resume reference: {reference}")
