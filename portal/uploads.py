# portal/uploads.py
"""
Receipt and supporting-document uploads.

Files are written to ``UPLOAD_FOLDER`` as ``<millisecond-timestamp>-<sanitized
name>``; the stored name is the reference kept on claims and is served back
from ``/uploads/<name>``.
"""
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import HTTPException

from .middleware import authenticate_user

logger = logging.getLogger(__name__)

uploads = Blueprint("uploads", __name__)
uploaded_files = Blueprint("uploaded_files", __name__)

ALLOWED_MIME_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
)
CHUNK_SIZE = 64 * 1024
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


class UploadError(HTTPException):
    """Rejected upload; carries the HTTP status to answer with."""

    def __init__(self, description, code=400):
        super().__init__(description)
        self.code = code


@dataclass
class StoredFile:
    file_name: str
    original_name: str
    size: int
    mime_type: str

    @property
    def url(self):
        return file_url(self.file_name)


def upload_dir():
    return Path(current_app.config["UPLOAD_FOLDER"]).resolve()


def sanitize_filename(name):
    return _UNSAFE_CHARS.sub("_", os.path.basename(name or "")) or "file"


def stored_name_for(original_name, now=None):
    millis = int((now if now is not None else time.time()) * 1000)
    return f"{millis}-{sanitize_filename(original_name)}"


def file_url(file_name):
    return f"/uploads/{file_name}"


def save_upload(storage_file, directory=None, max_bytes=None):
    """Validate and persist one uploaded file.

    The destination is removed again when anything goes wrong while writing,
    so a rejected or interrupted upload never leaves a partial file behind.
    """
    if storage_file is None or not storage_file.filename:
        raise UploadError("No file uploaded", 400)
    if storage_file.mimetype not in ALLOWED_MIME_TYPES:
        raise UploadError("Invalid file type. Only PDF, JPEG, PNG, GIF, and WEBP files are allowed.", 400)

    directory = Path(directory) if directory is not None else upload_dir()
    max_bytes = max_bytes if max_bytes is not None else current_app.config["MAX_UPLOAD_BYTES"]
    directory.mkdir(parents=True, exist_ok=True)

    file_name = stored_name_for(storage_file.filename)
    destination = directory / file_name
    written = 0
    try:
        with open(destination, "wb") as out:
            while True:
                chunk = storage_file.stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise UploadError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.", 413)
                out.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise

    return StoredFile(
        file_name=file_name,
        original_name=storage_file.filename,
        size=written,
        mime_type=storage_file.mimetype,
    )


def find_file_by_name(filename, directory=None):
    """Resolve an original file name to the stored (timestamp-prefixed) one."""
    directory = Path(directory) if directory is not None else upload_dir()
    if not filename or filename != os.path.basename(filename) or not directory.is_dir():
        return None
    if (directory / filename).is_file():
        return filename

    candidates = sorted(p.name for p in directory.iterdir() if p.is_file())
    for name in candidates:
        if name.endswith(filename):
            return name
    for name in candidates:
        if filename in name:
            return name
    return None


# ==========================================================
# ROUTES
# ==========================================================
@uploads.route("/upload", methods=["POST"])
@authenticate_user
def upload_file():
    stored = save_upload(request.files.get("file"))
    logger.info("Stored upload %s (%s, %s bytes)", stored.file_name, stored.mime_type, stored.size)
    return jsonify(
        fileName=stored.original_name,
        fileUrl=stored.file_name,
        fileSize=stored.size,
        mimeType=stored.mime_type,
        originalName=stored.original_name,
        fullFileUrl=stored.url,
    ), 201


@uploads.route("/file-lookup/<filename>", methods=["GET"])
@authenticate_user
def lookup_file(filename):
    found = find_file_by_name(filename)
    if found is None:
        return jsonify(message="File not found", requestedFilename=filename), 404
    return jsonify(fileName=filename, fileUrl=file_url(found), success=True), 200


@uploaded_files.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename):
    response = send_from_directory(upload_dir(), filename)
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response
